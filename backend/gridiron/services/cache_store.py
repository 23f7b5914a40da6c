"""
Local cache of upstream NFL data and the reads the aggregations are built on
"""
from typing import Dict, List, Optional, Set
from sqlalchemy.orm import Session
from sqlalchemy import and_, func, or_
import logging

from gridiron.config import settings
from gridiron.models.players import NFLTeam, NFLPlayer
from gridiron.models.nfl_schedule import NFLScheduleGame
from gridiron.models.player_stats import PlayerGameStats
from gridiron.models.leagues import FantasyLineup
from gridiron.models.pickem import PickemPick

logger = logging.getLogger(__name__)


class NFLCacheStore:
    """Insert-or-replace writes and keyed reads over the nfl_*_cache tables

    Writes are merged by primary key and replace the whole row, so running
    the same ingest twice leaves the cache unchanged. Callers own the commit.
    """

    def __init__(self, db: Session):
        self.db = db

    # ---- upserts -------------------------------------------------------

    def upsert_team(self, team: Dict) -> NFLTeam:
        return self.db.merge(NFLTeam(
            id=team['id'],
            name=team['name'],
            market=team.get('market') or '',
            alias=team.get('alias') or '',
            conference=team.get('conference') or '',
            division=team.get('division') or '',
            venue_name=team.get('venue_name') or ''
        ))

    def upsert_game(self, game: Dict) -> NFLScheduleGame:
        return self.db.merge(NFLScheduleGame(
            id=game['id'],
            season=game['season'],
            season_type=game.get('season_type') or settings.default_season_type,
            week=game['week'],
            scheduled=game.get('scheduled') or '',
            home_team_id=game.get('home_team_id') or '',
            away_team_id=game.get('away_team_id') or '',
            status=game.get('status') or 'scheduled',
            home_score=game.get('home_score'),
            away_score=game.get('away_score')
        ))

    def upsert_player(self, player: Dict) -> NFLPlayer:
        return self.db.merge(NFLPlayer(
            id=player['id'],
            name=player['name'],
            position=player.get('position') or '',
            team_id=player.get('team_id'),
            jersey_number=player.get('jersey_number') or ''
        ))

    def upsert_player_stat(self, stat: Dict) -> PlayerGameStats:
        return self.db.merge(PlayerGameStats(
            player_id=stat['player_id'],
            game_id=stat['game_id'],
            season=stat['season'],
            week=stat['week'],
            passing_yards=stat.get('passing_yards', 0),
            passing_tds=stat.get('passing_tds', 0),
            passing_ints=stat.get('passing_ints', 0),
            rushing_yards=stat.get('rushing_yards', 0),
            rushing_tds=stat.get('rushing_tds', 0),
            receiving_yards=stat.get('receiving_yards', 0),
            receiving_tds=stat.get('receiving_tds', 0),
            receptions=stat.get('receptions', 0),
            fumbles=stat.get('fumbles', 0),
            fantasy_points=stat.get('fantasy_points', 0.0)
        ))

    # ---- reads ---------------------------------------------------------

    def get_team(self, team_id: str) -> Optional[NFLTeam]:
        return self.db.get(NFLTeam, team_id)

    def get_game(self, game_id: str) -> Optional[NFLScheduleGame]:
        return self.db.get(NFLScheduleGame, game_id)

    def list_week_games(
        self, season: int, week: int, season_type: str = settings.default_season_type
    ) -> List[NFLScheduleGame]:
        """Cached games of one week of one season type in kickoff order"""
        return self.db.query(NFLScheduleGame).filter(
            NFLScheduleGame.season == season,
            NFLScheduleGame.season_type == season_type,
            NFLScheduleGame.week == week
        ).order_by(NFLScheduleGame.scheduled).all()

    def search_players(self, query: str, limit: int = 50) -> List[NFLPlayer]:
        pattern = f"%{query}%"
        return self.db.query(NFLPlayer).filter(
            or_(NFLPlayer.name.like(pattern), NFLPlayer.position.like(pattern))
        ).limit(limit).all()

    def lineup_player_ids(self, team_id: int, season: int) -> Set[str]:
        """Every player id placed in any slot of the team's lineups for a season"""
        lineups = self.db.query(FantasyLineup).filter(
            FantasyLineup.team_id == team_id,
            FantasyLineup.season == season
        ).all()

        player_ids = set()
        for lineup in lineups:
            player_ids.update(lineup.slot_player_ids())
        return player_ids

    def team_season_points(self, team_id: int, season: int) -> float:
        """Sum of cached fantasy points for the team's lineup players over a whole season"""
        player_ids = self.lineup_player_ids(team_id, season)
        if not player_ids:
            return 0.0

        total = self.db.query(func.sum(PlayerGameStats.fantasy_points)).filter(
            PlayerGameStats.season == season,
            PlayerGameStats.player_id.in_(sorted(player_ids))
        ).scalar()
        return float(total or 0.0)

    def finalized_picks(self, group_id: int, user_id: int, season: int) -> List[Dict]:
        """A member's picks joined to their games, restricted to finalized games"""
        rows = self.db.query(PickemPick, NFLScheduleGame).join(
            NFLScheduleGame, PickemPick.game_id == NFLScheduleGame.id
        ).filter(
            and_(
                PickemPick.group_id == group_id,
                PickemPick.user_id == user_id,
                PickemPick.season == season,
                NFLScheduleGame.status == settings.finalized_game_status
            )
        ).all()

        return [
            {
                'game_id': pick.game_id,
                'picked_team_id': pick.picked_team_id,
                'week': pick.week,
                'home_team_id': game.home_team_id,
                'away_team_id': game.away_team_id,
                'home_score': game.home_score,
                'away_score': game.away_score,
                'status': game.status
            }
            for pick, game in rows
        ]
