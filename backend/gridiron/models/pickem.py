from sqlalchemy import Column, String, Integer, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin

class PickemGroup(Base, TimestampMixin):
    __tablename__ = "pickem_groups"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    admin_id = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)
    season_year = Column(Integer, nullable=False)

    # Relationships
    admin = relationship("User")
    members = relationship("PickemGroupMember", back_populates="group")

    def __repr__(self):
        return f"<PickemGroup(id={self.id}, name={self.name}, season={self.season_year})>"

class PickemGroupMember(Base, TimestampMixin):
    __tablename__ = "pickem_group_members"

    id = Column(Integer, primary_key=True, autoincrement=True)
    group_id = Column(Integer, ForeignKey('pickem_groups.id'), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)

    # Relationships
    group = relationship("PickemGroup", back_populates="members")
    user = relationship("User")

    __table_args__ = (
        UniqueConstraint('group_id', 'user_id', name='uq_pickem_group_members_group_user'),
    )

class PickemPick(Base, TimestampMixin):
    __tablename__ = "pickem_picks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    group_id = Column(Integer, ForeignKey('pickem_groups.id'), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)
    game_id = Column(String(64), nullable=False)
    picked_team_id = Column(String(64), nullable=False)
    season = Column(Integer, nullable=False)
    week = Column(Integer, nullable=False)

    __table_args__ = (
        UniqueConstraint('group_id', 'user_id', 'game_id', name='uq_pickem_picks_group_user_game'),
    )

    def __repr__(self):
        return f"<PickemPick(group={self.group_id}, user={self.user_id}, game={self.game_id}, team={self.picked_team_id})>"
