from sqlalchemy import Column, String, Index
from .base import Base, CachedRowMixin

class NFLTeam(Base, CachedRowMixin):
    """Snapshot of a team from the league hierarchy, replaced on every teams sync"""
    __tablename__ = "nfl_teams_cache"

    id = Column(String(64), primary_key=True)  # Sportradar team id
    name = Column(String(100), nullable=False)
    market = Column(String(100), nullable=False, default="")
    alias = Column(String(10))
    conference = Column(String(50))
    division = Column(String(50))
    venue_name = Column(String(100))

    def __repr__(self):
        return f"<NFLTeam(id={self.id}, alias={self.alias}, name={self.name})>"

class NFLPlayer(Base, CachedRowMixin):
    """Roster entry as of the last roster sync of `team_id`"""
    __tablename__ = "nfl_players_cache"

    id = Column(String(64), primary_key=True)  # Sportradar player id
    name = Column(String(100), nullable=False, index=True)
    position = Column(String(10), index=True)
    team_id = Column(String(64), index=True)
    jersey_number = Column(String(5))

    __table_args__ = (
        Index('ix_nfl_players_cache_name_position', 'name', 'position'),
    )

    def __repr__(self):
        return f"<NFLPlayer(id={self.id}, name={self.name}, position={self.position})>"
