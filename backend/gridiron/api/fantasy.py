from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from sqlalchemy import func
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, Field
from gridiron.database import get_db
from gridiron.models.users import User
from gridiron.models.leagues import FantasyLeague, FantasyTeam, FantasyRoster, FantasyLineup, LINEUP_SLOTS
from gridiron.security import get_current_user
from gridiron.services.standings_service import StandingsService
from gridiron.utils.seasons import get_current_season
import logging

logger = logging.getLogger(__name__)

router = APIRouter()

class CreateLeagueRequest(BaseModel):
    name: str
    season_year: Optional[int] = None
    max_teams: Optional[int] = None
    draft_date: Optional[str] = None

class JoinLeagueRequest(BaseModel):
    team_name: str

class AddRosterPlayerRequest(BaseModel):
    player_id: str
    player_name: str
    position: str
    team_abbr: Optional[str] = None

class LineupRequest(BaseModel):
    season: int
    week: int
    qb: Optional[str] = None
    rb1: Optional[str] = None
    rb2: Optional[str] = None
    wr1: Optional[str] = None
    wr2: Optional[str] = None
    te: Optional[str] = None
    flex: Optional[str] = None
    k: Optional[str] = None
    def_: Optional[str] = Field(default=None, alias="def")

    class Config:
        populate_by_name = True

    def slot(self, name: str) -> Optional[str]:
        return self.def_ if name == "def" else getattr(self, name)

class RosterPlayerResponse(BaseModel):
    id: int
    team_id: int
    player_id: str
    player_name: str
    position: str
    team_abbr: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class StandingResponse(BaseModel):
    id: int
    league_id: int
    user_id: int
    team_name: str
    total_points: float

def _league_row(league: FantasyLeague, commissioner_name: str) -> dict:
    return {
        'id': league.id,
        'name': league.name,
        'commissioner_id': league.commissioner_id,
        'commissioner_name': commissioner_name,
        'season_year': league.season_year,
        'max_teams': league.max_teams,
        'draft_date': league.draft_date,
        'created_at': league.created_at
    }

def _owned_team(db: Session, team_id: int, user_id: int) -> FantasyTeam:
    team = db.query(FantasyTeam).filter(
        FantasyTeam.id == team_id,
        FantasyTeam.user_id == user_id
    ).first()
    if not team:
        raise HTTPException(status_code=403, detail="Unauthorized or team not found")
    return team

@router.get("/leagues")
async def get_leagues(current_user: dict = Depends(get_current_user), db: Session = Depends(get_db)):
    """Get all leagues with their commissioner and team count"""
    team_count = db.query(func.count(FantasyTeam.id)).filter(
        FantasyTeam.league_id == FantasyLeague.id
    ).correlate(FantasyLeague).scalar_subquery()

    rows = db.query(FantasyLeague, User.username, team_count).join(
        User, FantasyLeague.commissioner_id == User.id
    ).all()

    return [
        {**_league_row(league, username), 'team_count': count}
        for league, username, count in rows
    ]

@router.post("/leagues", status_code=201)
async def create_league(
    req: CreateLeagueRequest,
    current_user: dict = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Create a league with the caller as commissioner"""
    if not req.name.strip():
        raise HTTPException(status_code=400, detail="League name is required")

    league = FantasyLeague(
        name=req.name,
        commissioner_id=current_user["uid"],
        season_year=req.season_year or get_current_season(),
        max_teams=req.max_teams or 12,
        draft_date=req.draft_date
    )
    db.add(league)
    db.commit()
    db.refresh(league)

    logger.info(f"User {current_user['uid']} created league {league.id}")
    return {
        "id": league.id,
        "name": league.name,
        "season_year": league.season_year,
        "message": "League created successfully"
    }

@router.post("/leagues/{league_id}/join", status_code=201)
async def join_league(
    league_id: int,
    req: JoinLeagueRequest,
    current_user: dict = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Join a league by creating a team in it"""
    if not req.team_name.strip():
        raise HTTPException(status_code=400, detail="Team name is required")

    league = db.get(FantasyLeague, league_id)
    if not league:
        raise HTTPException(status_code=404, detail="League not found")

    team_count = db.query(FantasyTeam).filter(FantasyTeam.league_id == league_id).count()
    if team_count >= league.max_teams:
        raise HTTPException(status_code=400, detail="League is full")

    existing = db.query(FantasyTeam).filter(
        FantasyTeam.league_id == league_id,
        FantasyTeam.user_id == current_user["uid"]
    ).first()
    if existing:
        raise HTTPException(status_code=400, detail="You already have a team in this league")

    team = FantasyTeam(league_id=league_id, user_id=current_user["uid"], team_name=req.team_name)
    db.add(team)
    db.commit()
    db.refresh(team)

    return {"id": team.id, "team_name": team.team_name, "message": "Joined league successfully"}

@router.get("/leagues/{league_id}")
async def get_league(league_id: int, current_user: dict = Depends(get_current_user), db: Session = Depends(get_db)):
    """Get league details"""
    row = db.query(FantasyLeague, User.username).join(
        User, FantasyLeague.commissioner_id == User.id
    ).filter(FantasyLeague.id == league_id).first()

    if not row:
        raise HTTPException(status_code=404, detail="League not found")

    league, username = row
    return _league_row(league, username)

@router.get("/leagues/{league_id}/teams")
async def get_league_teams(league_id: int, current_user: dict = Depends(get_current_user), db: Session = Depends(get_db)):
    """Get the teams of a league with their owners"""
    rows = db.query(FantasyTeam, User.username).join(
        User, FantasyTeam.user_id == User.id
    ).filter(FantasyTeam.league_id == league_id).all()

    return [
        {
            'id': team.id,
            'league_id': team.league_id,
            'user_id': team.user_id,
            'team_name': team.team_name,
            'owner_name': username,
            'created_at': team.created_at
        }
        for team, username in rows
    ]

@router.get("/leagues/{league_id}/standings", response_model=List[StandingResponse])
async def get_league_standings(
    league_id: int,
    season: Optional[int] = None,
    current_user: dict = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Rank the league's teams by season-to-date fantasy points"""
    service = StandingsService(db)
    try:
        return await service.get_league_standings(league_id, season)
    except Exception as e:
        logger.error(f"Failed to build standings for league {league_id}: {e}")
        raise HTTPException(status_code=500, detail="Database error")

@router.get("/teams/{team_id}/roster", response_model=List[RosterPlayerResponse])
async def get_team_roster(team_id: int, current_user: dict = Depends(get_current_user), db: Session = Depends(get_db)):
    """Get a fantasy team's roster"""
    return db.query(FantasyRoster).filter(FantasyRoster.team_id == team_id).all()

@router.post("/teams/{team_id}/roster", status_code=201)
async def add_roster_player(
    team_id: int,
    req: AddRosterPlayerRequest,
    current_user: dict = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Add a player to the caller's team"""
    if not req.player_id or not req.player_name or not req.position:
        raise HTTPException(status_code=400, detail="Player information is required")

    _owned_team(db, team_id, current_user["uid"])

    entry = FantasyRoster(
        team_id=team_id,
        player_id=req.player_id,
        player_name=req.player_name,
        position=req.position,
        team_abbr=req.team_abbr
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)

    return {"id": entry.id, "message": "Player added to roster"}

@router.post("/teams/{team_id}/lineup")
async def set_lineup(
    team_id: int,
    req: LineupRequest,
    current_user: dict = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Set the caller's lineup for a week, replacing any earlier submission"""
    if req.season <= 0 or req.week <= 0:
        raise HTTPException(status_code=400, detail="Season and week are required")

    _owned_team(db, team_id, current_user["uid"])

    lineup = db.query(FantasyLineup).filter(
        FantasyLineup.team_id == team_id,
        FantasyLineup.season == req.season,
        FantasyLineup.week == req.week
    ).first()

    if not lineup:
        lineup = FantasyLineup(team_id=team_id, season=req.season, week=req.week)
        db.add(lineup)

    # Wholesale replace: slots left out of the request are cleared
    for slot in LINEUP_SLOTS:
        setattr(lineup, f"{slot}_player_id", req.slot(slot))

    db.commit()
    return {"message": "Lineup set successfully"}
