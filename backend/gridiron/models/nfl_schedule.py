from sqlalchemy import Column, String, Integer, Index
from .base import Base, CachedRowMixin

class NFLScheduleGame(Base, CachedRowMixin):
    __tablename__ = "nfl_schedule_cache"

    id = Column(String(64), primary_key=True)  # Sportradar game id
    season = Column(Integer, nullable=False)
    season_type = Column(String(10), nullable=False, default="REG")  # REG, PRE or PST; week numbers restart per type
    week = Column(Integer, nullable=False)
    scheduled = Column(String(40), nullable=False)  # Raw ISO timestamp from the provider

    home_team_id = Column(String(64), nullable=False)
    away_team_id = Column(String(64), nullable=False)

    # Free text: "scheduled", "inprogress", "closed", ...
    status = Column(String(20))
    home_score = Column(Integer, nullable=True)
    away_score = Column(Integer, nullable=True)

    __table_args__ = (
        Index('ix_nfl_schedule_cache_season_type_week', 'season', 'season_type', 'week'),
    )

    def __repr__(self):
        return f"<NFLScheduleGame(id={self.id}, season={self.season}, type={self.season_type}, week={self.week}, status={self.status})>"
