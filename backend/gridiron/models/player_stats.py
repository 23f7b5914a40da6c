from sqlalchemy import Column, String, Integer, Float, Index
from .base import Base, CachedRowMixin

class PlayerGameStats(Base, CachedRowMixin):
    __tablename__ = "nfl_stats_cache"

    # Composite primary key: one row per player per game
    player_id = Column(String(64), primary_key=True)
    game_id = Column(String(64), primary_key=True)

    season = Column(Integer, nullable=False)
    week = Column(Integer, nullable=False)

    # Passing stats
    passing_yards = Column(Integer, default=0)
    passing_tds = Column(Integer, default=0)
    passing_ints = Column(Integer, default=0)

    # Rushing stats
    rushing_yards = Column(Integer, default=0)
    rushing_tds = Column(Integer, default=0)

    # Receiving stats
    receiving_yards = Column(Integer, default=0)
    receiving_tds = Column(Integer, default=0)
    receptions = Column(Integer, default=0)

    fumbles = Column(Integer, default=0)  # Fumbles lost

    # Computed at ingest time, frozen until the game is ingested again
    fantasy_points = Column(Float, default=0.0)

    __table_args__ = (
        Index('ix_nfl_stats_cache_player_season', 'player_id', 'season'),
    )

    def __repr__(self):
        return f"<PlayerGameStats(player={self.player_id}, game={self.game_id}, points={self.fantasy_points})>"
