"""Tests for OAuth token handling and the TeamSnap client."""

import json
from unittest.mock import MagicMock

import pytest
import requests

from teamfeed.constants import (
    OAUTH_ACCESS_TOKEN_KEY,
    OAUTH_EXPIRES_AT_KEY,
    OAUTH_REFRESH_TOKEN_KEY,
    OAUTH_USER_INFO_KEY,
)
from teamfeed.exceptions import AuthenticationRequiredError, UpstreamFetchError
from teamfeed.upstream.oauth import OAuthTokenManager
from teamfeed.upstream.teamsnap_client import TeamSnapClient, collection_items

NOW_MS = 1_700_000_000_000


def make_response(status_code=200, payload=None, text=""):
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.text = text
    if isinstance(payload, Exception):
        response.json.side_effect = payload
    else:
        response.json.return_value = payload
    return response


def collection(*records):
    return {
        "collection": {
            "items": [
                {"data": [{"name": k, "value": v} for k, v in record.items()]}
                for record in records
            ]
        }
    }


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def oauth(store, config, session):
    return OAuthTokenManager(store, config, session, clock=lambda: NOW_MS)


@pytest.fixture
def client(oauth, config, session):
    return TeamSnapClient(oauth, config, session)


# OAuth


def test_get_valid_access_token_uses_stored_token(oauth, store, session):
    store.put(OAUTH_ACCESS_TOKEN_KEY, "stored")
    assert oauth.get_valid_access_token() == "stored"
    session.post.assert_not_called()


def test_get_valid_access_token_without_any_tokens(oauth, session):
    """No access or refresh token: None, and the token endpoint is never called."""
    assert oauth.get_valid_access_token() is None
    session.post.assert_not_called()


def test_refresh_success_stores_tokens(oauth, store, session, config, clock):
    store.put(OAUTH_REFRESH_TOKEN_KEY, "refresh-1")
    session.post.return_value = make_response(
        200,
        {"access_token": "access-2", "refresh_token": "refresh-2", "expires_in": 3600},
    )

    assert oauth.get_valid_access_token() == "access-2"

    _, kwargs = session.post.call_args
    assert session.post.call_args.args[0] == config.token_url
    assert kwargs["data"]["grant_type"] == "refresh_token"
    assert kwargs["data"]["refresh_token"] == "refresh-1"
    assert kwargs["data"]["client_id"] == "client-id"
    assert kwargs["timeout"] == config.http_timeout

    assert store.get(OAUTH_ACCESS_TOKEN_KEY) == "access-2"
    assert store.get(OAUTH_REFRESH_TOKEN_KEY) == "refresh-2"
    assert store.get(OAUTH_EXPIRES_AT_KEY) == str(NOW_MS + 3600 * 1000)

    # Access token expires out of the store with expires_in
    clock.now += 3600
    assert store.get(OAUTH_ACCESS_TOKEN_KEY) is None


def test_refresh_keeps_old_refresh_token_when_not_rotated(oauth, store, session):
    store.put(OAUTH_REFRESH_TOKEN_KEY, "refresh-1")
    session.post.return_value = make_response(200, {"access_token": "access-2"})

    tokens = oauth.refresh()
    assert tokens.expires_in == 7200
    assert store.get(OAUTH_REFRESH_TOKEN_KEY) == "refresh-1"


def test_zero_expires_in_still_expires(oauth, store, session, clock):
    store.put(OAUTH_REFRESH_TOKEN_KEY, "refresh-1")
    session.post.return_value = make_response(200, {"access_token": "short", "expires_in": 0})

    oauth.refresh()
    assert store.get(OAUTH_EXPIRES_AT_KEY) == str(NOW_MS + 1000)
    assert store.get(OAUTH_ACCESS_TOKEN_KEY) == "short"

    clock.now += 1
    assert store.get(OAUTH_ACCESS_TOKEN_KEY) is None


@pytest.mark.parametrize(
    "outcome",
    [
        make_response(400, {"error": "invalid_grant"}, text="invalid_grant"),
        make_response(200, ValueError("not json")),
        make_response(200, {"token_type": "bearer"}),
        requests.ConnectionError("down"),
    ],
)
def test_refresh_failure_leaves_state_untouched(oauth, store, session, outcome):
    store.put(OAUTH_REFRESH_TOKEN_KEY, "refresh-1")
    if isinstance(outcome, Exception):
        session.post.side_effect = outcome
    else:
        session.post.return_value = outcome

    assert oauth.refresh() is None
    assert store.get(OAUTH_REFRESH_TOKEN_KEY) == "refresh-1"
    assert store.get(OAUTH_ACCESS_TOKEN_KEY) is None


def test_is_authenticated(oauth, store, session):
    assert oauth.is_authenticated() is False

    store.put(OAUTH_ACCESS_TOKEN_KEY, "access")
    store.put(OAUTH_EXPIRES_AT_KEY, str(NOW_MS + 1000))
    assert oauth.is_authenticated() is True

    # Past recorded expiry with no refresh token
    store.put(OAUTH_EXPIRES_AT_KEY, str(NOW_MS - 1000))
    assert oauth.is_authenticated() is False
    session.post.assert_not_called()


def test_authorization_url(oauth, config):
    url = oauth.authorization_url("http://localhost/auth-callback")
    assert url.startswith(config.auth_url + "?")
    assert "client_id=client-id" in url
    assert "response_type=code" in url
    assert "redirect_uri=http%3A%2F%2Flocalhost%2Fauth-callback" in url


def test_exchange_code(oauth, store, session):
    session.post.return_value = make_response(
        200, {"access_token": "a", "refresh_token": "r", "expires_in": 60}
    )
    oauth.exchange_code("the-code", "http://localhost/auth-callback")

    form = session.post.call_args.kwargs["data"]
    assert form["grant_type"] == "authorization_code"
    assert form["code"] == "the-code"
    assert store.get(OAUTH_ACCESS_TOKEN_KEY) == "a"
    assert store.get(OAUTH_REFRESH_TOKEN_KEY) == "r"


def test_exchange_code_rejected(oauth, session):
    session.post.return_value = make_response(401, {}, text="bad code")
    with pytest.raises(AuthenticationRequiredError):
        oauth.exchange_code("the-code", "http://localhost/auth-callback")


def test_load_session(oauth, store):
    oauth.store_user_info({"id": 7, "email": "owner@example.com"})
    store.put(OAUTH_ACCESS_TOKEN_KEY, "a")
    store.put(OAUTH_EXPIRES_AT_KEY, "123")

    session = oauth.load_session()
    assert session.access_token == "a"
    assert session.refresh_token is None
    assert session.expires_at == 123
    assert session.user_info == {"id": 7, "email": "owner@example.com"}
    assert json.loads(store.get(OAUTH_USER_INFO_KEY))["email"] == "owner@example.com"


# Collection+JSON


def test_collection_items():
    payload = collection({"id": 1, "name": "Practice"}, {"id": 2})
    assert collection_items(payload) == [{"id": 1, "name": "Practice"}, {"id": 2}]


@pytest.mark.parametrize(
    "payload",
    [None, [], {}, {"collection": None}, {"collection": {"items": "nope"}}],
)
def test_collection_items_malformed(payload):
    assert collection_items(payload) == []


def test_collection_items_skips_bad_fields():
    payload = {"collection": {"items": [{"data": [{"value": 1}, "x", {"name": "id", "value": 3}]}]}}
    assert collection_items(payload) == [{"id": 3}]


# Client


def test_get_json_sends_bearer_token(client, store, session, config):
    store.put(OAUTH_ACCESS_TOKEN_KEY, "access")
    session.get.return_value = make_response(200, collection({"id": 5}))

    assert client.search_events("42") == [{"id": 5}]

    args, kwargs = session.get.call_args
    assert args[0] == f"{config.api_url}/events/search"
    assert kwargs["params"] == {"team_id": "42"}
    assert kwargs["headers"]["Authorization"] == "Bearer access"


def test_get_json_without_token(client, session):
    with pytest.raises(AuthenticationRequiredError):
        client.get_json("/me")
    session.get.assert_not_called()


def test_get_json_retries_once_after_refresh(client, store, session):
    store.put(OAUTH_ACCESS_TOKEN_KEY, "stale")
    store.put(OAUTH_REFRESH_TOKEN_KEY, "refresh")
    session.post.return_value = make_response(200, {"access_token": "fresh"})
    session.get.side_effect = [
        make_response(401, {}),
        make_response(200, collection({"email": "owner@example.com"})),
    ]

    assert client.get_me() == {"email": "owner@example.com"}
    assert session.get.call_count == 2
    assert session.get.call_args.kwargs["headers"]["Authorization"] == "Bearer fresh"


def test_get_json_401_with_failed_refresh(client, store, session):
    store.put(OAUTH_ACCESS_TOKEN_KEY, "stale")
    session.get.return_value = make_response(401, {})
    with pytest.raises(AuthenticationRequiredError):
        client.get_json("/me")
    assert session.get.call_count == 1


def test_get_json_second_401_is_not_retried(client, store, session):
    store.put(OAUTH_ACCESS_TOKEN_KEY, "stale")
    store.put(OAUTH_REFRESH_TOKEN_KEY, "refresh")
    session.post.return_value = make_response(200, {"access_token": "fresh"})
    session.get.return_value = make_response(401, {}, text="Unauthorized")

    with pytest.raises(UpstreamFetchError) as excinfo:
        client.get_json("/me")
    assert excinfo.value.status == 401
    assert session.get.call_count == 2


def test_get_json_http_error(client, store, session):
    store.put(OAUTH_ACCESS_TOKEN_KEY, "access")
    session.get.return_value = make_response(503, {}, text="Service Unavailable")
    with pytest.raises(UpstreamFetchError) as excinfo:
        client.search_events("42")
    assert str(excinfo.value) == "Error fetching /events/search: 503 Service Unavailable"
    assert excinfo.value.status == 503


def test_get_json_network_error(client, store, session):
    store.put(OAUTH_ACCESS_TOKEN_KEY, "access")
    session.get.side_effect = requests.Timeout("slow")
    with pytest.raises(UpstreamFetchError):
        client.get_json("/me")


def test_get_json_bad_body(client, store, session):
    store.put(OAUTH_ACCESS_TOKEN_KEY, "access")
    session.get.return_value = make_response(200, ValueError("not json"))
    with pytest.raises(UpstreamFetchError):
        client.get_json("/me")


def test_get_team_and_active_teams(client, store, session):
    store.put(OAUTH_ACCESS_TOKEN_KEY, "access")
    session.get.return_value = make_response(200, collection({"id": 42, "name": "Maple Leafs"}))
    team = client.get_team("42")
    assert team.id == "42"
    assert team.name == "Maple Leafs"

    session.get.return_value = make_response(
        200, collection({"id": 1, "name": "A"}, {"name": "no id"}, {"id": 2, "name": "B"})
    )
    assert [t.id for t in client.get_active_teams("7")] == ["1", "2"]
    assert session.get.call_args.kwargs["params"] == {"user_id": "7"}


def test_team_name_is_best_effort(client, store, session):
    store.put(OAUTH_ACCESS_TOKEN_KEY, "access")
    session.get.return_value = make_response(500, {}, text="oops")
    assert client.team_name("42") is None


def test_location_address(client, store, session):
    store.put(OAUTH_ACCESS_TOKEN_KEY, "access")
    session.get.return_value = make_response(
        200,
        collection(
            {"name": "Rink", "address": "1 Main St", "city": "Toronto", "state": "ON", "postal_code": None}
        ),
    )
    assert client.location_address("9") == "1 Main St Toronto ON"

    session.get.return_value = make_response(200, collection({"name": "Field"}))
    assert client.location_address("9") is None

    session.get.side_effect = requests.ConnectionError("down")
    assert client.location_address("9") is None
