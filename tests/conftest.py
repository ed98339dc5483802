"""Pytest configuration and fixtures for league API tests."""

import os
import tempfile

# Set up test environment before the application reads its settings
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ.setdefault("JWT_SECRET", "league-api-test-secret-with-enough-length")
os.environ["LOG_DIR"] = tempfile.mkdtemp(prefix="league-api-logs-")

from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from league_api import app
from league_api.data.database import build_engine, get_db
from league_api.data.models import Base, Team, Player, Match
from league_api.services.matches import MatchService

ADMIN = {"name": "League Admin", "email": "admin@league.test", "password": "s3cret-pass"}


@pytest.fixture
def engine():
    """A fresh in-memory database shared by every session in one test."""
    engine = build_engine("sqlite:///:memory:", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    """HTTP client whose requests use the test database."""

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_client(client):
    """Client carrying a bearer token for the registered admin."""
    response = client.post("/api/v1/admin/register", json=ADMIN)
    assert response.status_code == 201

    response = client.post(
        "/api/v1/admin/login",
        json={"email": ADMIN["email"], "password": ADMIN["password"]},
    )
    assert response.status_code == 200
    client.headers.update({"Authorization": f"Bearer {response.json()['token']}"})
    return client


# Seed helpers

def make_team(db, name, city=None):
    team = Team(name=name, city=city)
    db.add(team)
    db.commit()
    return team


def make_player(db, team, name, number, position="striker"):
    player = Player(team_id=team.id, name=name, number=number, position=position)
    db.add(player)
    db.commit()
    return player


def make_match(db, home, away, when=None, score=None, goals=()):
    """Schedule a match; with ``score`` it is reported as finished."""
    match = Match(
        match_time=when or datetime(2025, 1, 1, 15, 0),
        home_team_id=home.id,
        away_team_id=away.id,
    )
    db.add(match)
    db.commit()
    if score is not None:
        MatchService(db).report_result(match.id, score[0], score[1], goals)
    return match


@pytest.fixture
def league(db):
    """Two teams with two players each and one scheduled fixture."""
    lions = make_team(db, "Lions", city="Leeds")
    tigers = make_team(db, "Tigers", city="Hull")
    data = {
        "lions": lions,
        "tigers": tigers,
        "alan": make_player(db, lions, "Alan", 9),
        "bert": make_player(db, lions, "Bert", 10, position="midfielder"),
        "carl": make_player(db, tigers, "Carl", 9),
        "dave": make_player(db, tigers, "Dave", 1, position="goalkeeper"),
    }
    data["fixture"] = make_match(db, lions, tigers, when=datetime(2025, 3, 1, 15, 0))
    return data
