"""Endpoint tests through the ASGI app."""

import pytest

from gridiron.integrations.errors import UpstreamError
from gridiron.models import FantasyLineup, NFLScheduleGame, NFLTeam, PickemPick
from gridiron.services.cache_store import NFLCacheStore
from gridiron.utils.seasons import get_current_season


async def test_health(async_client):
    response = await async_client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


# ---- auth -------------------------------------------------------------

async def test_register_login_and_me(async_client):
    response = await async_client.post("/api/auth/register", json={
        "username": "gina", "email": "gina@example.com", "password": "hunter22",
    })
    assert response.status_code == 201
    body = response.json()
    assert body["user"]["username"] == "gina"
    assert body["token"]

    response = await async_client.post("/api/auth/login", json={"username": "gina@example.com", "password": "hunter22"})
    assert response.status_code == 200
    token = response.json()["token"]

    response = await async_client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    assert response.json()["email"] == "gina@example.com"


async def test_register_duplicate_username(async_client):
    payload = {"username": "hal", "email": "hal@example.com", "password": "pw"}
    assert (await async_client.post("/api/auth/register", json=payload)).status_code == 201

    response = await async_client.post("/api/auth/register", json={**payload, "email": "other@example.com"})
    assert response.status_code == 409


async def test_register_requires_all_fields(async_client):
    response = await async_client.post("/api/auth/register", json={"username": "", "email": "x@example.com", "password": "pw"})
    assert response.status_code == 400

    response = await async_client.post("/api/auth/register", json={"username": "ivy"})
    assert response.status_code == 422


async def test_login_with_wrong_password(async_client):
    await async_client.post("/api/auth/register", json={"username": "jo", "email": "jo@example.com", "password": "right"})

    response = await async_client.post("/api/auth/login", json={"username": "jo", "password": "wrong"})
    assert response.status_code == 401


async def test_protected_routes_need_a_valid_token(async_client):
    assert (await async_client.get("/api/fantasy/leagues")).status_code == 401
    assert (await async_client.get("/api/nfl/schedule/2024/REG/1")).status_code == 401

    response = await async_client.get("/api/pickem/groups", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


# ---- fantasy ----------------------------------------------------------

async def _create_league(client, headers, **overrides):
    payload = {"name": "Sunday League", "season_year": 2024, "max_teams": 2}
    payload.update(overrides)
    response = await client.post("/api/fantasy/leagues", json=payload, headers=headers)
    assert response.status_code == 201
    return response.json()["id"]


async def _join_league(client, headers, league_id, team_name):
    return await client.post(f"/api/fantasy/leagues/{league_id}/join", json={"team_name": team_name}, headers=headers)


async def test_league_join_rules(async_client, make_user):
    _, alice = make_user("alice")
    _, bob = make_user("bob")
    _, carol = make_user("carol")
    league_id = await _create_league(async_client, alice)

    assert (await _join_league(async_client, alice, league_id, "Alice FC")).status_code == 201

    response = await _join_league(async_client, alice, league_id, "Alice Again")
    assert response.status_code == 400
    assert response.json()["detail"] == "You already have a team in this league"

    assert (await _join_league(async_client, bob, league_id, "Bob FC")).status_code == 201

    response = await _join_league(async_client, carol, league_id, "Carol FC")
    assert response.status_code == 400
    assert response.json()["detail"] == "League is full"

    assert (await _join_league(async_client, carol, 999, "Nowhere")).status_code == 404

    leagues = (await async_client.get("/api/fantasy/leagues", headers=carol)).json()
    assert leagues[0]["team_count"] == 2
    assert leagues[0]["commissioner_name"] == "alice"

    teams = (await async_client.get(f"/api/fantasy/leagues/{league_id}/teams", headers=carol)).json()
    assert sorted(team["owner_name"] for team in teams) == ["alice", "bob"]


async def test_lineup_submission_replaces_previous(async_client, db_session, make_user):
    _, alice = make_user("alice")
    league_id = await _create_league(async_client, alice)
    team_id = (await _join_league(async_client, alice, league_id, "Alice FC")).json()["id"]

    response = await async_client.post(f"/api/fantasy/teams/{team_id}/lineup", headers=alice, json={
        "season": 2024, "week": 1, "qb": "p-qb", "def": "p-def",
    })
    assert response.status_code == 200
    assert response.json() == {"message": "Lineup set successfully"}

    await async_client.post(f"/api/fantasy/teams/{team_id}/lineup", headers=alice, json={
        "season": 2024, "week": 1, "rb1": "p-rb",
    })

    lineups = db_session.query(FantasyLineup).all()
    assert len(lineups) == 1
    assert lineups[0].rb1_player_id == "p-rb"
    assert lineups[0].qb_player_id is None
    assert lineups[0].def_player_id is None


async def test_lineup_and_roster_require_team_owner(async_client, make_user):
    _, alice = make_user("alice")
    _, bob = make_user("bob")
    league_id = await _create_league(async_client, alice)
    team_id = (await _join_league(async_client, alice, league_id, "Alice FC")).json()["id"]

    response = await async_client.post(f"/api/fantasy/teams/{team_id}/lineup", headers=bob,
                                       json={"season": 2024, "week": 1, "qb": "p-qb"})
    assert response.status_code == 403

    response = await async_client.post(f"/api/fantasy/teams/{team_id}/roster", headers=bob,
                                       json={"player_id": "p1", "player_name": "Somebody", "position": "QB"})
    assert response.status_code == 403

    response = await async_client.post(f"/api/fantasy/teams/{team_id}/roster", headers=alice,
                                       json={"player_id": "p1", "player_name": "Somebody", "position": "QB", "team_abbr": "KC"})
    assert response.status_code == 201

    roster = (await async_client.get(f"/api/fantasy/teams/{team_id}/roster", headers=bob)).json()
    assert [(entry["player_id"], entry["team_abbr"]) for entry in roster] == [("p1", "KC")]


async def test_league_standings_endpoint(async_client, db_session, make_user):
    _, alice = make_user("alice")
    _, bob = make_user("bob")
    league_id = await _create_league(async_client, alice)
    alice_team = (await _join_league(async_client, alice, league_id, "Alice FC")).json()["id"]
    await _join_league(async_client, bob, league_id, "Bob FC")

    await async_client.post(f"/api/fantasy/teams/{alice_team}/lineup", headers=alice,
                            json={"season": 2024, "week": 1, "qb": "p-qb"})
    NFLCacheStore(db_session).upsert_player_stat({
        "player_id": "p-qb", "game_id": "g1", "season": 2024, "week": 1, "fantasy_points": 16.0,
    })
    db_session.commit()

    response = await async_client.get(f"/api/fantasy/leagues/{league_id}/standings", params={"season": 2024}, headers=bob)

    assert response.status_code == 200
    assert [(row["team_name"], row["total_points"]) for row in response.json()] == [("Alice FC", 16.0), ("Bob FC", 0.0)]


# ---- pick'em ----------------------------------------------------------

async def _create_group(client, headers):
    response = await client.post("/api/pickem/groups", json={"name": "Office Pool"}, headers=headers)
    assert response.status_code == 201
    return response.json()["id"]


async def test_group_membership(async_client, make_user):
    _, dana = make_user("dana")
    _, eli = make_user("eli")
    group_id = await _create_group(async_client, dana)

    members = (await async_client.get(f"/api/pickem/groups/{group_id}/members", headers=dana)).json()
    assert [member["username"] for member in members] == ["dana"]

    assert (await async_client.post(f"/api/pickem/groups/{group_id}/join", headers=eli)).status_code == 200
    response = await async_client.post(f"/api/pickem/groups/{group_id}/join", headers=eli)
    assert response.status_code == 400
    assert (await async_client.post("/api/pickem/groups/999/join", headers=eli)).status_code == 404

    groups = (await async_client.get("/api/pickem/groups", headers=eli)).json()
    assert groups[0]["member_count"] == 2
    assert groups[0]["admin_name"] == "dana"


async def test_picks_replace_and_require_membership(async_client, db_session, make_user):
    _, dana = make_user("dana")
    _, outsider = make_user("outsider")
    group_id = await _create_group(async_client, dana)
    season = get_current_season()
    pick = {"game_id": "g1", "picked_team_id": "team-kc", "season": season, "week": 1}

    response = await async_client.post(f"/api/pickem/groups/{group_id}/picks", json=pick, headers=outsider)
    assert response.status_code == 403

    assert (await async_client.post(f"/api/pickem/groups/{group_id}/picks", json=pick, headers=dana)).status_code == 200
    await async_client.post(f"/api/pickem/groups/{group_id}/picks", json={**pick, "picked_team_id": "team-bal"}, headers=dana)

    assert db_session.query(PickemPick).count() == 1

    picks = (await async_client.get(f"/api/pickem/groups/{group_id}/picks/1", headers=dana)).json()
    assert len(picks) == 1
    assert picks[0]["picked_team_id"] == "team-bal"
    assert picks[0]["status"] is None


async def test_leaderboard_endpoint(async_client, db_session, make_user):
    dana_user, dana = make_user("dana")
    group_id = await _create_group(async_client, dana)
    NFLCacheStore(db_session).upsert_game({
        "id": "g1", "season": 2024, "week": 1, "home_team_id": "team-kc", "away_team_id": "team-bal",
        "status": "closed", "home_score": 27, "away_score": 20,
    })
    db_session.commit()
    await async_client.post(f"/api/pickem/groups/{group_id}/picks", headers=dana,
                            json={"game_id": "g1", "picked_team_id": "team-kc", "season": 2024, "week": 1})

    response = await async_client.get(f"/api/pickem/groups/{group_id}/leaderboard", params={"season": 2024}, headers=dana)

    assert response.status_code == 200
    assert response.json() == [{
        "id": dana_user.id, "username": "dana", "wins": 1, "losses": 0, "total_picks": 1, "win_percentage": 100.0,
    }]


# ---- nfl ----------------------------------------------------------------

async def test_week_schedule_degrades_to_empty(async_client, make_user, fake_client):
    _, headers = make_user("fan")

    response = await async_client.get("/api/nfl/schedule/2024/REG/30", headers=headers)

    assert response.status_code == 200
    assert response.json()["week"]["games"] == []
    assert fake_client.called("get_week_schedule")
    assert fake_client.called("get_season_schedule")


async def test_teams_upstream_failure_is_500(async_client, make_user):
    _, headers = make_user("fan")

    response = await async_client.get("/api/nfl/teams", headers=headers)

    assert response.status_code == 500
    assert response.json()["detail"].startswith("Failed to fetch teams")


async def test_teams_refreshes_cache(async_client, db_session, make_user, fake_client):
    _, headers = make_user("fan")
    fake_client.responses["get_league_hierarchy"] = {"conferences": [{"name": "NFC", "divisions": [
        {"name": "NFC North", "teams": [{"id": "team-det", "name": "Lions", "market": "Detroit", "alias": "DET"}]},
    ]}]}

    response = await async_client.get("/api/nfl/teams", headers=headers)

    assert response.status_code == 200
    assert db_session.get(NFLTeam, "team-det").division == "NFC North"


async def test_player_search(async_client, db_session, make_user):
    _, headers = make_user("fan")
    cache = NFLCacheStore(db_session)
    cache.upsert_player({"id": "p1", "name": "Patrick Mahomes", "position": "QB", "team_id": "team-kc", "jersey_number": "15"})
    db_session.commit()

    response = await async_client.get("/api/nfl/players/search/Mahomes", headers=headers)

    assert response.status_code == 200
    assert [(player["id"], player["jersey_number"]) for player in response.json()] == [("p1", "15")]


# ---- users --------------------------------------------------------------

async def test_user_memberships(async_client, make_user):
    alice_user, alice = make_user("alice")
    league_id = await _create_league(async_client, alice, name="Work League")
    await _join_league(async_client, alice, league_id, "Alice FC")
    await _create_group(async_client, alice)

    teams = (await async_client.get(f"/api/users/{alice_user.id}/fantasy-teams", headers=alice)).json()
    groups = (await async_client.get(f"/api/users/{alice_user.id}/pickem-groups", headers=alice)).json()

    assert [(team["team_name"], team["league_name"]) for team in teams] == [("Alice FC", "Work League")]
    assert [group["name"] for group in groups] == ["Office Pool"]
    assert (await async_client.get("/api/users/999", headers=alice)).status_code == 404


# ---- upstream failures and schedule routes ----------------------------

@pytest.mark.parametrize("path, detail", [
    ("/api/nfl/teams", "Failed to fetch teams"),
    ("/api/nfl/schedule", "Failed to fetch schedule"),
    ("/api/nfl/schedule/2024", "Failed to fetch schedule"),
    ("/api/nfl/games/g1", "Failed to fetch game details"),
    ("/api/nfl/games/g1/stats", "Failed to fetch game statistics"),
    ("/api/nfl/teams/team-kc/roster", "Failed to fetch roster"),
    ("/api/nfl/players/p1", "Failed to fetch player profile"),
])
async def test_upstream_failures_are_500(async_client, make_user, fake_client, path, detail):
    _, headers = make_user("fan")
    for method in ("get_league_hierarchy", "get_season_schedule", "get_game_summary",
                   "get_game_statistics", "get_team_roster", "get_player_profile"):
        fake_client.responses[method] = UpstreamError("upstream unavailable", status_code=503)

    response = await async_client.get(path, headers=headers)

    assert response.status_code == 500
    assert response.json()["detail"] == f"{detail}: upstream unavailable"


async def test_season_schedule_routes_cache_games(async_client, db_session, make_user, fake_client):
    _, headers = make_user("fan")
    fake_client.responses["get_season_schedule"] = {"year": 2023, "type": "REG", "weeks": [
        {"sequence": 1, "title": "1", "games": [
            {"id": "g1", "status": "closed", "scheduled": "2023-09-08T00:20:00+00:00",
             "home": {"id": "team-kc"}, "away": {"id": "team-det"},
             "scoring": {"home_points": 20, "away_points": 21}},
        ]},
    ]}

    response = await async_client.get("/api/nfl/schedule/2023", headers=headers)
    assert response.status_code == 200
    assert response.json()["year"] == 2023
    assert fake_client.calls[-1] == ("get_season_schedule", (2023, "REG"))
    assert db_session.get(NFLScheduleGame, "g1").away_score == 21

    response = await async_client.get("/api/nfl/schedule", headers=headers)
    assert response.status_code == 200
    assert fake_client.calls[-1] == ("get_season_schedule", (get_current_season(), "REG"))


async def test_week_schedule_served_from_cache(async_client, db_session, make_user, fake_client, sample_teams):
    _, headers = make_user("fan")
    NFLCacheStore(db_session).upsert_game({
        "id": "g1", "season": 2024, "season_type": "REG", "week": 1, "scheduled": "2024-09-06T00:20:00+00:00",
        "home_team_id": "team-kc", "away_team_id": "team-bal", "status": "closed",
        "home_score": 27, "away_score": 20,
    })
    db_session.commit()

    response = await async_client.get("/api/nfl/schedule/2024/REG/1", headers=headers)

    assert response.status_code == 200
    game = response.json()["week"]["games"][0]
    assert game["home"]["alias"] == "KC"
    assert game["scoring"] == {"home_points": 27, "away_points": 20}
    assert fake_client.calls == []


# ---- season and week validation ---------------------------------------

@pytest.mark.parametrize("season, week", [(0, 1), (2024, 0), (2024, -3)])
async def test_lineup_rejects_non_positive_season_or_week(async_client, db_session, make_user, season, week):
    _, alice = make_user("alice")
    league_id = await _create_league(async_client, alice)
    team_id = (await _join_league(async_client, alice, league_id, "Alice FC")).json()["id"]

    response = await async_client.post(f"/api/fantasy/teams/{team_id}/lineup", headers=alice,
                                       json={"season": season, "week": week, "qb": "p-qb"})

    assert response.status_code == 400
    assert db_session.query(FantasyLineup).count() == 0


@pytest.mark.parametrize("season, week", [(0, 1), (2024, 0)])
async def test_pick_rejects_non_positive_season_or_week(async_client, db_session, make_user, season, week):
    _, dana = make_user("dana")
    group_id = await _create_group(async_client, dana)

    response = await async_client.post(f"/api/pickem/groups/{group_id}/picks", headers=dana,
                                       json={"game_id": "g1", "picked_team_id": "team-kc", "season": season, "week": week})

    assert response.status_code == 400
    assert db_session.query(PickemPick).count() == 0
