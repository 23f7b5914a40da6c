"""
Pick'em leaderboard: wins and losses on finalized games
"""
import asyncio
from typing import Dict, List, Optional
from sqlalchemy.orm import Session
import logging

from gridiron.models.pickem import PickemGroupMember
from gridiron.models.users import User
from gridiron.services.cache_store import NFLCacheStore
from gridiron.utils.scoring import round_half_away
from gridiron.utils.seasons import get_current_season

logger = logging.getLogger(__name__)


def pick_won(pick: Dict) -> bool:
    """Home wins on a strictly higher score; otherwise the away team is the winner"""
    home_score = pick.get('home_score') or 0
    away_score = pick.get('away_score') or 0
    winner = pick['home_team_id'] if home_score > away_score else pick['away_team_id']
    return pick['picked_team_id'] == winner


def tally_picks(picks: List[Dict]) -> Dict:
    wins = sum(1 for pick in picks if pick_won(pick))
    total = len(picks)
    win_percentage = round_half_away(wins / total * 100, 2) if total else 0
    return {
        'wins': wins,
        'losses': total - wins,
        'total_picks': total,
        'win_percentage': win_percentage
    }


class LeaderboardService:
    """Rank group members by correct picks, then by win percentage"""

    def __init__(self, db: Session):
        self.db = db
        self.cache = NFLCacheStore(db)

    async def get_group_leaderboard(self, group_id: int, season: Optional[int] = None) -> List[Dict]:
        season = season or get_current_season()
        members = self.db.query(User.id, User.username).join(
            PickemGroupMember, PickemGroupMember.user_id == User.id
        ).filter(PickemGroupMember.group_id == group_id).all()

        leaderboard = await asyncio.gather(
            *(self._member_record(member.id, member.username, group_id, season) for member in members)
        )

        return sorted(leaderboard, key=lambda row: (row['wins'], row['win_percentage']), reverse=True)

    async def _member_record(self, user_id: int, username: str, group_id: int, season: int) -> Dict:
        row = {'id': user_id, 'username': username}
        try:
            picks = self.cache.finalized_picks(group_id, user_id, season)
            row.update(tally_picks(picks))
        except Exception as e:
            logger.warning(f"Could not score picks for user {user_id} in group {group_id}: {e}")
            self.db.rollback()
            row.update({'wins': 0, 'losses': 0, 'total_picks': 0, 'win_percentage': 0})
        return row
