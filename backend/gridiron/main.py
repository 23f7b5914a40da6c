from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from gridiron.database import create_tables, dispose_engine
from gridiron.config import settings
from gridiron.security import check_jwt_secret
from gridiron.api import auth, users, nfl, fantasy, pickem
import logging

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    check_jwt_secret()
    create_tables()
    yield
    # Shutdown
    dispose_engine()

# Create FastAPI application
app = FastAPI(
    title="NFL Fantasy & Pick'em API",
    description="Fantasy league management and weekly pick'em backed by cached Sportradar data",
    version="1.0.0",
    debug=settings.debug,
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(users.router, prefix="/api/users", tags=["users"])
app.include_router(fantasy.router, prefix="/api/fantasy", tags=["fantasy"])
app.include_router(pickem.router, prefix="/api/pickem", tags=["pickem"])
app.include_router(nfl.router, prefix="/api/nfl", tags=["nfl"])

@app.get("/api/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok", "message": "NFL Fantasy & Pick'em API is running"}
