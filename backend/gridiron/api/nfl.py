from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel
from gridiron.config import settings
from gridiron.database import get_db
from gridiron.integrations.sportradar_api import SportradarAPIClient
from gridiron.security import get_current_user
from gridiron.services.cache_store import NFLCacheStore
from gridiron.services.nfl_data_service import NFLDataService
from gridiron.services.schedule_resolver import ScheduleResolver
from gridiron.utils.seasons import get_current_season
import logging

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(get_current_user)])

class NFLPlayerResponse(BaseModel):
    id: str
    name: str
    position: Optional[str] = None
    team_id: Optional[str] = None
    jersey_number: Optional[str] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

async def get_sportradar_client():
    """Dependency providing a Sportradar client for the duration of a request"""
    client = SportradarAPIClient()
    try:
        yield client
    finally:
        await client.close()

@router.get("/teams")
async def get_teams(
    db: Session = Depends(get_db),
    client: SportradarAPIClient = Depends(get_sportradar_client)
):
    """Get the league hierarchy and refresh the team cache"""
    service = NFLDataService(db, client)
    try:
        return await service.sync_teams()
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to fetch teams: {e}")

@router.get("/schedule")
@router.get("/schedule/{season}")
async def get_season_schedule(
    season: Optional[int] = None,
    db: Session = Depends(get_db),
    client: SportradarAPIClient = Depends(get_sportradar_client)
):
    """Get a regular season schedule (current season by default) and refresh the schedule cache"""
    season = season or get_current_season()
    service = NFLDataService(db, client)
    try:
        return await service.sync_season_schedule(season, settings.default_season_type)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to fetch schedule: {e}")

@router.get("/schedule/{season}/{season_type}/{week}")
async def get_week_schedule(
    season: int,
    season_type: str,
    week: int,
    db: Session = Depends(get_db),
    client: SportradarAPIClient = Depends(get_sportradar_client)
):
    """Get one week's games, from the cache when possible; upstream failures yield an empty week"""
    resolver = ScheduleResolver(db, client)
    try:
        return await resolver.resolve_week(season, season_type, week)
    except Exception as e:
        logger.error(f"Failed to resolve week schedule {season} {season_type} {week}: {e}")
        raise HTTPException(status_code=500, detail="Database error")

@router.get("/games/{game_id}")
async def get_game_details(
    game_id: str,
    db: Session = Depends(get_db),
    client: SportradarAPIClient = Depends(get_sportradar_client)
):
    """Get a game summary"""
    service = NFLDataService(db, client)
    try:
        return await service.get_game_summary(game_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to fetch game details: {e}")

@router.get("/games/{game_id}/stats")
async def get_game_statistics(
    game_id: str,
    db: Session = Depends(get_db),
    client: SportradarAPIClient = Depends(get_sportradar_client)
):
    """Get game statistics and cache every player's line with fantasy points"""
    service = NFLDataService(db, client)
    try:
        return await service.sync_game_statistics(game_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to fetch game statistics: {e}")

@router.get("/teams/{team_id}/roster")
async def get_team_roster(
    team_id: str,
    db: Session = Depends(get_db),
    client: SportradarAPIClient = Depends(get_sportradar_client)
):
    """Get a team's roster and refresh the player cache"""
    service = NFLDataService(db, client)
    try:
        return await service.sync_team_roster(team_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to fetch roster: {e}")

@router.get("/players/search/{query}", response_model=List[NFLPlayerResponse])
async def search_players(query: str, db: Session = Depends(get_db)):
    """Search cached players by name or position"""
    try:
        return NFLCacheStore(db).search_players(query, limit=50)
    except Exception as e:
        logger.error(f"Player search failed for '{query}': {e}")
        raise HTTPException(status_code=500, detail="Database error")

@router.get("/players/{player_id}")
async def get_player_profile(
    player_id: str,
    db: Session = Depends(get_db),
    client: SportradarAPIClient = Depends(get_sportradar_client)
):
    """Get a player's profile"""
    service = NFLDataService(db, client)
    try:
        return await service.get_player_profile(player_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to fetch player profile: {e}")
