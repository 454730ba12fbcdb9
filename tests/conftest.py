"""Shared fixtures: an SQLite ticket database and a fake Flavortown API."""

import json
import logging
from datetime import datetime, timezone

import httpx
import pytest
from sqlalchemy import create_engine, insert

from crimson.clients.nephthys import HelperLeaderboard, tickets_table, users_table
from crimson.config import load_settings

API_BASE = "https://flavortown.example.com/api/v1"
API_KEY = "test-key"


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


@pytest.fixture
def settings(tmp_path):
    return load_settings(
        _env_file=None,
        database_url=f"sqlite:///{tmp_path / 'nephthys.db'}",
        flavortown_api_base=API_BASE,
        flavortown_api_key=API_KEY,
    )


@pytest.fixture
def leaderboard(settings):
    board = HelperLeaderboard(create_engine(settings.database_url))
    board.ensure_schema()
    yield board
    board.close()


@pytest.fixture
def add_user(leaderboard):
    """Insert a user, returning its primary key."""
    counter = {"id": 0}

    def _add(slack_id: str, helper: bool = True) -> int:
        counter["id"] += 1
        with leaderboard.engine.begin() as conn:
            conn.execute(
                insert(users_table).values(id=counter["id"], slackId=slack_id, helper=helper)
            )
        return counter["id"]

    return _add


@pytest.fixture
def close_tickets(leaderboard):
    """Insert tickets closed by a user at the given times."""

    def _close(user_id: int, *closed_at: datetime) -> None:
        with leaderboard.engine.begin() as conn:
            conn.execute(
                insert(tickets_table),
                [{"closedById": user_id, "closedAt": moment} for moment in closed_at],
            )

    return _close


def flavortown_user(user_id: int, slack_id: str, display_name: str, cookies=None) -> dict:
    return {
        "id": user_id,
        "slack_id": slack_id,
        "display_name": display_name,
        "avatar": f"https://cdn.example.com/{slack_id}.png",
        "project_ids": [],
        "cookies": cookies,
    }


class FakeDirectory:
    """In-memory Flavortown /users endpoint that records every request."""

    def __init__(self, users_by_query: dict[str, list[dict]] | None = None):
        self.users_by_query = users_by_query or {}
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        query = request.url.params.get("query", "")
        return httpx.Response(200, json={"users": self.users_by_query.get(query, [])})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def queries(self) -> list[str]:
        return [r.url.params.get("query") for r in self.requests]


@pytest.fixture
def directory():
    return FakeDirectory(
        {
            "U1": [flavortown_user(11, "U1", "Alice", cookies=120)],
            "U2": [flavortown_user(22, "U2", "Bob")],
            "U3": [flavortown_user(33, "U3", "Carol")],
        }
    )


def raw_transport(status_code: int, body) -> httpx.MockTransport:
    content = body if isinstance(body, (bytes, str)) else json.dumps(body)

    def _handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, content=content)

    return httpx.MockTransport(_handler)


@pytest.fixture(autouse=True)
def _reset_crimson_logger():
    """Drop handlers bound to a previous test's captured stderr."""
    yield
    logging.getLogger("crimson").handlers.clear()
