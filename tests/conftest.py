import pytest

from teamfeed import create_app
from teamfeed.config import FeedConfig
from teamfeed.constants import OAUTH_ACCESS_TOKEN_KEY
from teamfeed.context import AppContext
from teamfeed.models.team import Team
from teamfeed.storage.kv_store import MemoryStore


class FakeClock:
    """Settable clock returning seconds."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class FakeTeamSnap:
    """In-memory stand-in for TeamSnapClient."""

    def __init__(self):
        self.teams: dict[str, str | None] = {}
        self.events: dict[str, list[dict]] = {}
        self.addresses: dict[str, str] = {}
        self.user: dict | None = {"id": 7, "email": "owner@example.com"}
        self.search_calls: list[str] = []
        self.location_calls: list[str] = []

    def search_events(self, team_id: str) -> list[dict]:
        self.search_calls.append(team_id)
        return list(self.events.get(team_id, []))

    def get_team(self, team_id: str) -> Team | None:
        if team_id not in self.teams:
            return None
        return Team(id=team_id, name=self.teams[team_id])

    def team_name(self, team_id: str) -> str | None:
        return self.teams.get(team_id)

    def location_address(self, location_id: str) -> str | None:
        self.location_calls.append(location_id)
        return self.addresses.get(location_id)

    def get_me(self) -> dict | None:
        return self.user

    def get_active_teams(self, user_id: str) -> list[Team]:
        return [Team(id=team_id, name=name) for team_id, name in self.teams.items()]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return MemoryStore(clock=clock)


@pytest.fixture
def config(tmp_path):
    return FeedConfig(
        client_id="client-id",
        client_secret="client-secret",
        allowed_user_email="owner@example.com",
        store_backend="memory",
        log_dir=tmp_path / "logs",
    )


@pytest.fixture
def teamsnap():
    fake = FakeTeamSnap()
    fake.teams["42"] = "Maple Leafs"
    return fake


@pytest.fixture
def context(config, store, teamsnap):
    return AppContext(config=config, store=store, client=teamsnap)


@pytest.fixture
def authenticated(store):
    store.put(OAUTH_ACCESS_TOKEN_KEY, "access-token", ttl=7200)


@pytest.fixture
def app(context):
    """Create and configure a Flask app for testing."""
    app = create_app(context)
    app.config["TESTING"] = True
    return app
