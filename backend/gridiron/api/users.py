from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from gridiron.database import get_db
from gridiron.models.users import User
from gridiron.models.leagues import FantasyLeague, FantasyTeam
from gridiron.models.pickem import PickemGroup, PickemGroupMember
from gridiron.security import get_current_user
from gridiron.api.auth import UserProfileResponse

router = APIRouter(dependencies=[Depends(get_current_user)])

@router.get("/{user_id}", response_model=UserProfileResponse)
async def get_user(user_id: int, db: Session = Depends(get_db)):
    """Get a user's public profile"""
    user = db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user

@router.get("/{user_id}/fantasy-teams")
async def get_user_fantasy_teams(user_id: int, db: Session = Depends(get_db)):
    """Get every fantasy team the user owns, with its league name"""
    rows = db.query(FantasyTeam, FantasyLeague.name).join(
        FantasyLeague, FantasyTeam.league_id == FantasyLeague.id
    ).filter(FantasyTeam.user_id == user_id).all()

    return [
        {
            'id': team.id,
            'league_id': team.league_id,
            'user_id': team.user_id,
            'team_name': team.team_name,
            'league_name': league_name,
            'created_at': team.created_at
        }
        for team, league_name in rows
    ]

@router.get("/{user_id}/pickem-groups")
async def get_user_pickem_groups(user_id: int, db: Session = Depends(get_db)):
    """Get every pick'em group the user belongs to"""
    rows = db.query(PickemGroup, User.username).join(
        PickemGroupMember, PickemGroupMember.group_id == PickemGroup.id
    ).join(
        User, PickemGroup.admin_id == User.id
    ).filter(PickemGroupMember.user_id == user_id).all()

    return [
        {
            'id': group.id,
            'name': group.name,
            'admin_id': group.admin_id,
            'admin_name': admin_name,
            'season_year': group.season_year,
            'created_at': group.created_at
        }
        for group, admin_name in rows
    ]
