"""
Ingest flows: fetch from Sportradar, normalize, and write through to the local cache
"""
from typing import Dict, Optional, Tuple
from sqlalchemy.orm import Session
import logging

from gridiron.config import settings
from gridiron.integrations.sportradar_api import SportradarAPIClient
from gridiron.services.cache_store import NFLCacheStore
from gridiron.utils.scoring import calculate_fantasy_points
from gridiron.utils.seasons import get_current_season

logger = logging.getLogger(__name__)


def _as_int(value) -> Optional[int]:
    """Provider numbers arrive as ints, strings or not at all"""
    if value is None or value == '':
        return None
    try:
        # "250.0" is a valid yardage
        return int(float(value))
    except (ValueError, TypeError, OverflowError):
        return None


def extract_player_stats(player: Dict) -> Dict[str, int]:
    """Map one player entry of a statistics payload to the nine scoring stats"""
    passing = player.get('passing') or {}
    rushing = player.get('rushing') or {}
    receiving = player.get('receiving') or {}
    fumbles = player.get('fumbles') or {}

    return {
        'passing_yards': _as_int(passing.get('yards')) or 0,
        'passing_tds': _as_int(passing.get('touchdowns')) or 0,
        'passing_ints': _as_int(passing.get('interceptions')) or 0,
        'rushing_yards': _as_int(rushing.get('yards')) or 0,
        'rushing_tds': _as_int(rushing.get('touchdowns')) or 0,
        'receiving_yards': _as_int(receiving.get('yards')) or 0,
        'receiving_tds': _as_int(receiving.get('touchdowns')) or 0,
        'receptions': _as_int(receiving.get('receptions')) or 0,
        'fumbles': _as_int(fumbles.get('lost')) or 0,
    }


class NFLDataService:
    """Service for syncing Sportradar data into the cache tables"""

    def __init__(self, db: Session, client: Optional[SportradarAPIClient] = None):
        self.db = db
        self.client = client or SportradarAPIClient()
        self.cache = NFLCacheStore(db)

    async def sync_teams(self) -> Dict:
        """Fetch the league hierarchy and cache every team in it"""
        data = await self.client.get_league_hierarchy()

        try:
            count = 0
            for conference in data.get('conferences') or []:
                for division in conference.get('divisions') or []:
                    for team in division.get('teams') or []:
                        if not team.get('id'):
                            continue
                        self.cache.upsert_team({
                            'id': team['id'],
                            'name': team.get('name') or '',
                            'market': team.get('market'),
                            'alias': team.get('alias'),
                            'conference': conference.get('name'),
                            'division': division.get('name'),
                            'venue_name': (team.get('venue') or {}).get('name')
                        })
                        count += 1

            self.db.commit()
            logger.info(f"Cached {count} NFL teams")
            return data

        except Exception as e:
            logger.error(f"Failed to cache teams: {e}")
            self.db.rollback()
            raise

    async def sync_season_schedule(self, season: int, season_type: str = settings.default_season_type) -> Dict:
        """Fetch a season schedule and cache every game of every week"""
        data = await self.client.get_season_schedule(season, season_type)

        try:
            count = 0
            for week in data.get('weeks') or []:
                week_number = _as_int(week.get('sequence'))
                if week_number is None:
                    continue
                for game in week.get('games') or []:
                    if not game.get('id'):
                        continue
                    self.cache.upsert_game(self._game_record(game, season, season_type, week_number))
                    count += 1

            self.db.commit()
            logger.info(f"Cached {count} games for {season} {season_type}")
            return data

        except Exception as e:
            logger.error(f"Failed to cache schedule for {season} {season_type}: {e}")
            self.db.rollback()
            raise

    async def sync_team_roster(self, team_id: str) -> Dict:
        """Fetch a team roster and cache its players under that team"""
        data = await self.client.get_team_roster(team_id)

        try:
            count = 0
            for player in data.get('players') or []:
                if not player.get('id'):
                    continue
                name = player.get('name') or f"{player.get('first_name', '')} {player.get('last_name', '')}".strip()
                jersey = player.get('jersey', player.get('jersey_number'))
                self.cache.upsert_player({
                    'id': player['id'],
                    'name': name,
                    'position': player.get('position'),
                    'team_id': team_id,
                    'jersey_number': str(jersey) if jersey is not None else None
                })
                count += 1

            self.db.commit()
            logger.info(f"Cached {count} players for team {team_id}")
            return data

        except Exception as e:
            logger.error(f"Failed to cache roster for team {team_id}: {e}")
            self.db.rollback()
            raise

    async def sync_game_statistics(self, game_id: str) -> Dict:
        """Fetch game statistics, score every player and cache the lines"""
        data = await self.client.get_game_statistics(game_id)

        statistics = data.get('statistics')
        if not statistics:
            return data

        try:
            season, week = self._resolve_game_week(game_id, data)
            count = 0
            for side in ('home', 'away'):
                for player in (statistics.get(side) or {}).get('players') or []:
                    if not player.get('id'):
                        continue
                    stats = extract_player_stats(player)
                    self.cache.upsert_player_stat({
                        'player_id': player['id'],
                        'game_id': game_id,
                        'season': season,
                        'week': week,
                        **stats,
                        'fantasy_points': calculate_fantasy_points(stats)
                    })
                    count += 1

            self.db.commit()
            logger.info(f"Cached {count} player stat lines for game {game_id} (season {season}, week {week})")
            return data

        except Exception as e:
            logger.error(f"Failed to cache statistics for game {game_id}: {e}")
            self.db.rollback()
            raise

    async def get_game_summary(self, game_id: str) -> Dict:
        return await self.client.get_game_summary(game_id)

    async def get_player_profile(self, player_id: str) -> Dict:
        return await self.client.get_player_profile(player_id)

    def _game_record(self, game: Dict, season: int, season_type: str, week: int) -> Dict:
        scoring = game.get('scoring') or {}
        return {
            'id': game['id'],
            'season': season,
            'season_type': season_type,
            'week': week,
            'scheduled': game.get('scheduled'),
            'home_team_id': (game.get('home') or {}).get('id'),
            'away_team_id': (game.get('away') or {}).get('id'),
            'status': game.get('status'),
            'home_score': _as_int(scoring.get('home_points')),
            'away_score': _as_int(scoring.get('away_points'))
        }

    def _resolve_game_week(self, game_id: str, data: Dict) -> Tuple[int, int]:
        """Season/week for a game: cached schedule row, then payload summary, then current season week 1"""
        cached = self.cache.get_game(game_id)
        if cached:
            return cached.season, cached.week

        summary = data.get('summary') or {}
        season = _as_int((summary.get('season') or {}).get('year'))
        week = _as_int((summary.get('week') or {}).get('sequence'))
        if season is None or week is None:
            logger.warning(f"Game {game_id} is not in the schedule cache; filing stats under the current season")
        return season or get_current_season(), week or 1

    async def close(self):
        """Close the HTTP session"""
        await self.client.close()
