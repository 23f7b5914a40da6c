"""
League standings: season-to-date fantasy points per team
"""
import asyncio
from typing import Dict, List, Optional
from sqlalchemy.orm import Session
import logging

from gridiron.models.leagues import FantasyTeam
from gridiron.services.cache_store import NFLCacheStore
from gridiron.utils.scoring import round_half_away
from gridiron.utils.seasons import get_current_season

logger = logging.getLogger(__name__)


class StandingsService:
    """Rank a league's teams by the cached points of their lineup players"""

    def __init__(self, db: Session):
        self.db = db
        self.cache = NFLCacheStore(db)

    async def get_league_standings(self, league_id: int, season: Optional[int] = None) -> List[Dict]:
        season = season or get_current_season()
        teams = self.db.query(FantasyTeam).filter(FantasyTeam.league_id == league_id).all()

        standings = await asyncio.gather(*(self._team_standing(team, season) for team in teams))

        # Ranking happens only once every team has resolved
        return sorted(standings, key=lambda row: row['total_points'], reverse=True)

    async def _team_standing(self, team: FantasyTeam, season: int) -> Dict:
        row = {
            'id': team.id,
            'league_id': team.league_id,
            'user_id': team.user_id,
            'team_name': team.team_name,
            'total_points': 0.0
        }
        try:
            row['total_points'] = round_half_away(self.cache.team_season_points(team.id, season), 2)
        except Exception as e:
            logger.warning(f"Could not total points for team {team.id}, counting 0: {e}")
            self.db.rollback()
        return row
