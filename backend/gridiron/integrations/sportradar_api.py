from typing import Dict, Any, Optional
import httpx
from gridiron.config import settings
from gridiron.integrations.base_api import BaseAPIClient
import logging

logger = logging.getLogger(__name__)

class SportradarAPIClient(BaseAPIClient):
    """Client for the Sportradar NFL API"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        api_key = settings.sportradar_api_key if api_key is None else api_key
        if not api_key:
            logger.warning("SPORTRADAR_API_KEY is not set; upstream requests will be rejected")
        super().__init__(
            "Sportradar NFL",
            base_url or settings.sportradar_api_base,
            default_params={"api_key": api_key},
            timeout=settings.sportradar_timeout,
            transport=transport
        )

    async def get_league_hierarchy(self) -> Dict[str, Any]:
        """Get conferences, divisions and teams"""
        return await self._make_request("league/hierarchy.json")

    async def get_season_schedule(self, season: int, season_type: str = settings.default_season_type) -> Dict[str, Any]:
        """Get every week of a season"""
        return await self._make_request(f"games/{season}/{season_type}/schedule.json")

    async def get_week_schedule(self, season: int, season_type: str, week: int) -> Dict[str, Any]:
        """Get the games of a single week"""
        return await self._make_request(f"games/{season}/{season_type}/{week}/schedule.json")

    async def get_game_summary(self, game_id: str) -> Dict[str, Any]:
        """Get game summary"""
        return await self._make_request(f"games/{game_id}/summary.json")

    async def get_game_statistics(self, game_id: str) -> Dict[str, Any]:
        """Get per-player statistics for a game"""
        return await self._make_request(f"games/{game_id}/statistics.json")

    async def get_team_roster(self, team_id: str) -> Dict[str, Any]:
        """Get a team's full roster"""
        return await self._make_request(f"teams/{team_id}/full_roster.json")

    async def get_player_profile(self, player_id: str) -> Dict[str, Any]:
        """Get a player's profile"""
        return await self._make_request(f"players/{player_id}/profile.json")
