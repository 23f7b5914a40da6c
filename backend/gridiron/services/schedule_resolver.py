"""
Week schedule lookups: cache first, then upstream, then an empty week
"""
from typing import Dict, List, Optional
from sqlalchemy.orm import Session
import logging

from gridiron.integrations.errors import UpstreamNotFoundError, UpstreamRateLimitError
from gridiron.integrations.sportradar_api import SportradarAPIClient
from gridiron.models.nfl_schedule import NFLScheduleGame
from gridiron.services.cache_store import NFLCacheStore

logger = logging.getLogger(__name__)


class ScheduleResolver:
    """Resolve the games of one week without ever failing the caller

    Order of preference:
      1. cached schedule rows for (season, week); upstream is not touched
      2. the upstream week schedule, returned verbatim
      3. on not-found, the week picked out of the upstream season schedule
      4. an empty game list for anything else
    The resolver only reads the cache.
    """

    def __init__(self, db: Session, client: SportradarAPIClient):
        self.db = db
        self.client = client
        self.cache = NFLCacheStore(db)

    async def resolve_week(self, season: int, season_type: str, week: int) -> Dict:
        cached_games = self.cache.list_week_games(season, week, season_type)
        if cached_games:
            logger.debug(f"Serving {len(cached_games)} cached games for {season} week {week}")
            return self._week_payload(season, season_type, {
                'sequence': week,
                'title': str(week),
                'games': [self._cached_game(game) for game in cached_games]
            })

        try:
            return await self.client.get_week_schedule(season, season_type, week)
        except UpstreamNotFoundError:
            logger.info(f"No week schedule upstream for {season} {season_type} week {week}, trying the season schedule")
            return await self._week_from_season(season, season_type, week)
        except UpstreamRateLimitError:
            logger.warning(f"Rate limited fetching {season} {season_type} week {week}, returning an empty week")
        except Exception as e:
            logger.warning(f"Failed to fetch {season} {season_type} week {week}, returning an empty week: {e}")

        return self._empty_week(season, season_type, week)

    async def _week_from_season(self, season: int, season_type: str, week: int) -> Dict:
        try:
            data = await self.client.get_season_schedule(season, season_type)
        except Exception as e:
            logger.warning(f"Season schedule fallback failed for {season} {season_type}: {e}")
            return self._empty_week(season, season_type, week)

        match = self._find_week(data.get('weeks') or [], week)
        if match is None:
            logger.info(f"Week {week} not present in the {season} {season_type} schedule")
            return self._empty_week(season, season_type, week)

        return self._week_payload(season, season_type, match)

    @staticmethod
    def _find_week(weeks: List[Dict], week: int) -> Optional[Dict]:
        for candidate in weeks:
            sequence = candidate.get('sequence')
            try:
                if sequence is not None and int(sequence) == week:
                    return candidate
            except (ValueError, TypeError):
                pass
            if str(candidate.get('title', '')) == str(week):
                return candidate
        return None

    def _cached_game(self, game: NFLScheduleGame) -> Dict:
        return {
            'id': game.id,
            'status': game.status,
            'scheduled': game.scheduled,
            'home': self._team_display(game.home_team_id),
            'away': self._team_display(game.away_team_id),
            'scoring': {
                'home_points': game.home_score,
                'away_points': game.away_score
            }
        }

    def _team_display(self, team_id: str) -> Dict:
        team = self.cache.get_team(team_id) if team_id else None
        if team is None:
            return {'id': team_id, 'name': team_id, 'market': None, 'alias': None}
        return {'id': team.id, 'name': team.name, 'market': team.market, 'alias': team.alias}

    @staticmethod
    def _week_payload(season: int, season_type: str, week: Dict) -> Dict:
        return {'year': season, 'type': season_type, 'week': week}

    def _empty_week(self, season: int, season_type: str, week: int) -> Dict:
        return self._week_payload(season, season_type, {'sequence': week, 'title': str(week), 'games': []})
