"""Shared pytest fixtures for the gridiron API tests."""
from typing import AsyncGenerator, Dict, Generator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from httpx import AsyncClient, ASGITransport

from gridiron.integrations.errors import UpstreamNotFoundError


class FakeSportradarClient:
    """Stands in for SportradarAPIClient; each method returns or raises its configured response.

    Methods without a configured response raise UpstreamNotFoundError. Every call is
    recorded in `calls` as (method_name, args).
    """

    def __init__(self, **responses):
        self.responses = responses
        self.calls = []
        self.closed = False

    async def _respond(self, name: str, *args):
        self.calls.append((name, args))
        if name not in self.responses:
            raise UpstreamNotFoundError(f"No data for {name}", status_code=404)
        result = self.responses[name]
        if isinstance(result, Exception):
            raise result
        return result

    def called(self, name: str) -> bool:
        return any(call_name == name for call_name, _ in self.calls)

    async def get_league_hierarchy(self):
        return await self._respond("get_league_hierarchy")

    async def get_season_schedule(self, season, season_type="REG"):
        return await self._respond("get_season_schedule", season, season_type)

    async def get_week_schedule(self, season, season_type, week):
        return await self._respond("get_week_schedule", season, season_type, week)

    async def get_game_summary(self, game_id):
        return await self._respond("get_game_summary", game_id)

    async def get_game_statistics(self, game_id):
        return await self._respond("get_game_statistics", game_id)

    async def get_team_roster(self, team_id):
        return await self._respond("get_team_roster", team_id)

    async def get_player_profile(self, player_id):
        return await self._respond("get_player_profile", player_id)

    async def close(self):
        self.closed = True


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """Create fresh test database session with isolated in-memory database."""
    from gridiron.models import Base

    # StaticPool keeps one connection so every session sees the same in-memory data
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)

    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestSessionLocal()

    yield session

    session.close()
    engine.dispose()


@pytest.fixture
def sportradar_stub():
    """Factory for FakeSportradarClient: sportradar_stub(get_week_schedule={...})"""
    return FakeSportradarClient


@pytest.fixture
def fake_client() -> FakeSportradarClient:
    return FakeSportradarClient()


@pytest.fixture(scope="function")
async def async_client(db_session: Session, fake_client: FakeSportradarClient) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for testing FastAPI endpoints."""
    from gridiron.main import app
    from gridiron.database import get_db
    from gridiron.api.nfl import get_sportradar_client

    def override_get_db():
        yield db_session

    async def override_get_sportradar_client():
        yield fake_client

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_sportradar_client] = override_get_sportradar_client

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session: Session):
    """Factory creating a user row and returning (user, auth headers)."""
    from gridiron.models import User
    from gridiron.security import create_access_token

    def _make_user(username: str) -> tuple:
        user = User(username=username, email=f"{username}@example.com", password_hash="not-a-real-hash")
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        headers: Dict[str, str] = {"Authorization": f"Bearer {create_access_token(user.id, user.username)}"}
        return user, headers

    return _make_user


@pytest.fixture
def sample_teams(db_session: Session):
    """Two cached NFL teams."""
    from gridiron.models import NFLTeam

    teams = [
        NFLTeam(id="team-kc", name="Chiefs", market="Kansas City", alias="KC",
                conference="AFC", division="AFC West", venue_name="GEHA Field at Arrowhead Stadium"),
        NFLTeam(id="team-bal", name="Ravens", market="Baltimore", alias="BAL",
                conference="AFC", division="AFC North", venue_name="M&T Bank Stadium"),
    ]
    db_session.add_all(teams)
    db_session.commit()
    return teams
