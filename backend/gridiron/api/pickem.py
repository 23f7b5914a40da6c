from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from sqlalchemy import func
from typing import List, Optional
from pydantic import BaseModel
from gridiron.database import get_db
from gridiron.models.users import User
from gridiron.models.nfl_schedule import NFLScheduleGame
from gridiron.models.pickem import PickemGroup, PickemGroupMember, PickemPick
from gridiron.security import get_current_user
from gridiron.services.leaderboard_service import LeaderboardService
from gridiron.utils.seasons import get_current_season
import logging

logger = logging.getLogger(__name__)

router = APIRouter()

class CreateGroupRequest(BaseModel):
    name: str
    season_year: Optional[int] = None

class PickRequest(BaseModel):
    game_id: str
    picked_team_id: str
    season: int
    week: int

class LeaderboardEntry(BaseModel):
    id: int
    username: str
    wins: int
    losses: int
    total_picks: int
    win_percentage: float

def _group_row(group: PickemGroup, admin_name: str) -> dict:
    return {
        'id': group.id,
        'name': group.name,
        'admin_id': group.admin_id,
        'admin_name': admin_name,
        'season_year': group.season_year,
        'created_at': group.created_at
    }

@router.get("/groups")
async def get_groups(current_user: dict = Depends(get_current_user), db: Session = Depends(get_db)):
    """Get all pick'em groups with their admin and member count"""
    member_count = db.query(func.count(PickemGroupMember.id)).filter(
        PickemGroupMember.group_id == PickemGroup.id
    ).correlate(PickemGroup).scalar_subquery()

    rows = db.query(PickemGroup, User.username, member_count).join(
        User, PickemGroup.admin_id == User.id
    ).all()

    return [
        {**_group_row(group, username), 'member_count': count}
        for group, username, count in rows
    ]

@router.post("/groups", status_code=201)
async def create_group(
    req: CreateGroupRequest,
    current_user: dict = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Create a group; the creator becomes its admin and first member"""
    if not req.name.strip():
        raise HTTPException(status_code=400, detail="Group name is required")

    group = PickemGroup(
        name=req.name,
        admin_id=current_user["uid"],
        season_year=req.season_year or get_current_season()
    )
    db.add(group)
    db.flush()
    db.add(PickemGroupMember(group_id=group.id, user_id=current_user["uid"]))
    db.commit()
    db.refresh(group)

    return {
        "id": group.id,
        "name": group.name,
        "season_year": group.season_year,
        "message": "Group created successfully"
    }

@router.post("/groups/{group_id}/join")
async def join_group(group_id: int, current_user: dict = Depends(get_current_user), db: Session = Depends(get_db)):
    """Join a pick'em group"""
    if not db.get(PickemGroup, group_id):
        raise HTTPException(status_code=404, detail="Group not found")

    existing = db.query(PickemGroupMember).filter(
        PickemGroupMember.group_id == group_id,
        PickemGroupMember.user_id == current_user["uid"]
    ).first()
    if existing:
        raise HTTPException(status_code=400, detail="Already a member of this group")

    db.add(PickemGroupMember(group_id=group_id, user_id=current_user["uid"]))
    db.commit()
    return {"message": "Joined group successfully"}

@router.get("/groups/{group_id}")
async def get_group(group_id: int, current_user: dict = Depends(get_current_user), db: Session = Depends(get_db)):
    """Get group details"""
    row = db.query(PickemGroup, User.username).join(
        User, PickemGroup.admin_id == User.id
    ).filter(PickemGroup.id == group_id).first()

    if not row:
        raise HTTPException(status_code=404, detail="Group not found")

    group, username = row
    return _group_row(group, username)

@router.get("/groups/{group_id}/members")
async def get_group_members(group_id: int, current_user: dict = Depends(get_current_user), db: Session = Depends(get_db)):
    """Get the members of a group"""
    rows = db.query(User, PickemGroupMember.created_at).join(
        PickemGroupMember, PickemGroupMember.user_id == User.id
    ).filter(PickemGroupMember.group_id == group_id).all()

    return [
        {'id': user.id, 'username': user.username, 'email': user.email, 'joined_at': joined_at}
        for user, joined_at in rows
    ]

@router.post("/groups/{group_id}/picks")
async def make_pick(
    group_id: int,
    req: PickRequest,
    current_user: dict = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Pick a winner for a game; picking the same game again replaces the earlier pick"""
    if not req.game_id or not req.picked_team_id or req.season <= 0 or req.week <= 0:
        raise HTTPException(status_code=400, detail="Game ID, picked team, season, and week are required")

    membership = db.query(PickemGroupMember).filter(
        PickemGroupMember.group_id == group_id,
        PickemGroupMember.user_id == current_user["uid"]
    ).first()
    if not membership:
        raise HTTPException(status_code=403, detail="You must be a member of this group")

    pick = db.query(PickemPick).filter(
        PickemPick.group_id == group_id,
        PickemPick.user_id == current_user["uid"],
        PickemPick.game_id == req.game_id
    ).first()

    if not pick:
        pick = PickemPick(group_id=group_id, user_id=current_user["uid"], game_id=req.game_id)
        db.add(pick)

    pick.picked_team_id = req.picked_team_id
    pick.season = req.season
    pick.week = req.week

    db.commit()
    return {"message": "Pick saved successfully"}

@router.get("/groups/{group_id}/picks/{week}")
async def get_week_picks(
    group_id: int,
    week: int,
    current_user: dict = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get the caller's picks for a week of the current season, with cached game state"""
    rows = db.query(PickemPick, NFLScheduleGame).outerjoin(
        NFLScheduleGame, PickemPick.game_id == NFLScheduleGame.id
    ).filter(
        PickemPick.group_id == group_id,
        PickemPick.user_id == current_user["uid"],
        PickemPick.season == get_current_season(),
        PickemPick.week == week
    ).all()

    return [
        {
            'id': pick.id,
            'group_id': pick.group_id,
            'user_id': pick.user_id,
            'game_id': pick.game_id,
            'picked_team_id': pick.picked_team_id,
            'season': pick.season,
            'week': pick.week,
            'home_team_id': game.home_team_id if game else None,
            'away_team_id': game.away_team_id if game else None,
            'status': game.status if game else None,
            'home_score': game.home_score if game else None,
            'away_score': game.away_score if game else None
        }
        for pick, game in rows
    ]

@router.get("/groups/{group_id}/leaderboard", response_model=List[LeaderboardEntry])
async def get_leaderboard(
    group_id: int,
    season: Optional[int] = None,
    current_user: dict = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Rank group members by correct picks on finalized games"""
    service = LeaderboardService(db)
    try:
        return await service.get_group_leaderboard(group_id, season)
    except Exception as e:
        logger.error(f"Failed to build leaderboard for group {group_id}: {e}")
        raise HTTPException(status_code=500, detail="Database error")
