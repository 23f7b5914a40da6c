from .base import Base
from .players import NFLTeam, NFLPlayer
from .nfl_schedule import NFLScheduleGame
from .player_stats import PlayerGameStats
from .users import User
from .leagues import FantasyLeague, FantasyTeam, FantasyRoster, FantasyLineup, LINEUP_SLOTS
from .pickem import PickemGroup, PickemGroupMember, PickemPick

__all__ = [
    "Base",
    "NFLTeam", "NFLPlayer",
    "NFLScheduleGame",
    "PlayerGameStats",
    "User",
    "FantasyLeague", "FantasyTeam", "FantasyRoster", "FantasyLineup", "LINEUP_SLOTS",
    "PickemGroup", "PickemGroupMember", "PickemPick"
]
