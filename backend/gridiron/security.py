from datetime import datetime, timedelta, timezone
from typing import Optional
from fastapi import Depends, HTTPException
from fastapi.security import OAuth2PasswordBearer
from jose import jwt, JWTError
import bcrypt
import logging

from gridiron.config import DEFAULT_JWT_SECRET, Settings, settings

logger = logging.getLogger(__name__)

# ---------------------- User Authentication ---------------------- #

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")

# Create access token for a user
def create_access_token(user_id: int, username: str) -> str:
    to_encode = {
        "uid": user_id,
        "username": username,
        "exp": datetime.now(timezone.utc) + timedelta(days=settings.access_token_expire_days)
    }
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)

# Verify the access token
def verify_access_token(token: str) -> Optional[dict]:
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        logger.debug(f"JWT verification failed: {e}")
        return None

# Refuse to sign tokens with the published default secret outside development
def check_jwt_secret(config: Settings = settings) -> None:
    if config.jwt_secret == DEFAULT_JWT_SECRET and config.environment != "development":
        raise RuntimeError("JWT_SECRET must be set when ENVIRONMENT is not development")
    if config.jwt_secret == DEFAULT_JWT_SECRET:
        logger.warning("Using the default JWT secret; set JWT_SECRET before deploying")

# Get the data for the user
def get_current_user(token: str = Depends(oauth2_scheme)) -> dict:
    payload = verify_access_token(token)
    if payload is None or "uid" not in payload:
        raise HTTPException(status_code=401, detail="Invalid access token")
    return payload

# --------------------- Encryption/Validation --------------------- #

def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')

def check_password(password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(password.encode('utf-8'), hashed_password.encode('utf-8'))
