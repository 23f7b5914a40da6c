from sqlalchemy import Column, String, Integer, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin

# Fixed weekly lineup, in display order
LINEUP_SLOTS = ("qb", "rb1", "rb2", "wr1", "wr2", "te", "flex", "k", "def")

class FantasyLeague(Base, TimestampMixin):
    __tablename__ = "fantasy_leagues"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    commissioner_id = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)
    season_year = Column(Integer, nullable=False)
    max_teams = Column(Integer, default=12, nullable=False)
    draft_date = Column(String(40))

    # Relationships
    commissioner = relationship("User")
    teams = relationship("FantasyTeam", back_populates="league")

    def __repr__(self):
        return f"<FantasyLeague(id={self.id}, name={self.name}, season={self.season_year})>"

class FantasyTeam(Base, TimestampMixin):
    __tablename__ = "fantasy_teams"

    id = Column(Integer, primary_key=True, autoincrement=True)
    league_id = Column(Integer, ForeignKey('fantasy_leagues.id'), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)
    team_name = Column(String(100), nullable=False)

    # Relationships
    league = relationship("FantasyLeague", back_populates="teams")
    owner = relationship("User")
    roster = relationship("FantasyRoster", back_populates="team")
    lineups = relationship("FantasyLineup", back_populates="team")

    __table_args__ = (
        UniqueConstraint('league_id', 'user_id', name='uq_fantasy_teams_league_user'),
    )

    def __repr__(self):
        return f"<FantasyTeam(id={self.id}, league={self.league_id}, name={self.team_name})>"

class FantasyRoster(Base, TimestampMixin):
    __tablename__ = "fantasy_rosters"

    id = Column(Integer, primary_key=True, autoincrement=True)
    team_id = Column(Integer, ForeignKey('fantasy_teams.id'), nullable=False, index=True)
    player_id = Column(String(64), nullable=False)
    player_name = Column(String(100), nullable=False)
    position = Column(String(10), nullable=False)
    team_abbr = Column(String(10))

    # Relationships
    team = relationship("FantasyTeam", back_populates="roster")

class FantasyLineup(Base, TimestampMixin):
    """Starting lineup for one week; player ids are not checked against the roster"""
    __tablename__ = "fantasy_lineups"

    id = Column(Integer, primary_key=True, autoincrement=True)
    team_id = Column(Integer, ForeignKey('fantasy_teams.id'), nullable=False, index=True)
    season = Column(Integer, nullable=False)
    week = Column(Integer, nullable=False)

    qb_player_id = Column(String(64))
    rb1_player_id = Column(String(64))
    rb2_player_id = Column(String(64))
    wr1_player_id = Column(String(64))
    wr2_player_id = Column(String(64))
    te_player_id = Column(String(64))
    flex_player_id = Column(String(64))
    k_player_id = Column(String(64))
    def_player_id = Column(String(64))

    # Relationships
    team = relationship("FantasyTeam", back_populates="lineups")

    __table_args__ = (
        UniqueConstraint('team_id', 'season', 'week', name='uq_fantasy_lineups_team_season_week'),
    )

    def slot_player_ids(self):
        """Non-empty player ids across the nine slots"""
        ids = (getattr(self, f"{slot}_player_id") for slot in LINEUP_SLOTS)
        return [player_id for player_id in ids if player_id]
