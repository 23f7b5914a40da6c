from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from datetime import datetime
from pydantic import BaseModel
from typing import Optional
from gridiron.database import get_db
from gridiron.models.users import User
from gridiron.security import create_access_token, hash_password, check_password, get_current_user
import logging

logger = logging.getLogger(__name__)

router = APIRouter()

class RegisterRequest(BaseModel):
    username: str
    email: str
    password: str

class LoginRequest(BaseModel):
    username: str  # Username or email
    password: str

class UserResponse(BaseModel):
    id: int
    username: str
    email: str

    class Config:
        from_attributes = True

class UserProfileResponse(UserResponse):
    created_at: Optional[datetime] = None

class TokenResponse(BaseModel):
    token: str
    user: UserResponse
    message: Optional[str] = None

@router.post("/register", response_model=TokenResponse, status_code=201)
async def register(req: RegisterRequest, db: Session = Depends(get_db)):
    """Create an account and return a bearer token for it"""
    if not req.username or not req.email or not req.password:
        raise HTTPException(status_code=400, detail="Username, email, and password are required")

    user = User(username=req.username, email=req.email, password_hash=hash_password(req.password))
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Username or email already exists")

    db.refresh(user)
    logger.info(f"Registered user {user.id} ({user.username})")
    return TokenResponse(
        token=create_access_token(user.id, user.username),
        user=UserResponse.model_validate(user),
        message="User created successfully"
    )

@router.post("/login", response_model=TokenResponse)
async def login(req: LoginRequest, db: Session = Depends(get_db)):
    """Exchange username (or email) and password for a bearer token"""
    user = db.query(User).filter(
        or_(User.username == req.username, User.email == req.username)
    ).first()

    if not user or not check_password(req.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    return TokenResponse(
        token=create_access_token(user.id, user.username),
        user=UserResponse.model_validate(user)
    )

@router.get("/me", response_model=UserProfileResponse)
async def get_me(current_user: dict = Depends(get_current_user), db: Session = Depends(get_db)):
    """Get the authenticated user"""
    user = db.get(User, current_user["uid"])
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user
