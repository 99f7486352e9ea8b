"""Tests for Pydantic models."""

import pytest
from pydantic import ValidationError

from teamfeed.models import Location, TeamPreferences, TokenMapping, TokenResponse


def test_token_mapping_aliases():
    mapping = TokenMapping.model_validate({"teamId": 42, "filterType": "all"})
    assert mapping.team_id == "42"
    assert TokenMapping(team_id="42", filter_type="games").to_json() == (
        '{"teamId":"42","filterType":"games"}'
    )


def test_token_mapping_rejects_unknown_filter():
    with pytest.raises(ValidationError):
        TokenMapping(team_id="42", filter_type="practices")


def test_team_preferences_dump_by_alias():
    prefs = TeamPreferences(customName="Leafs")
    assert prefs.model_dump(by_alias=True) == {
        "customName": "Leafs",
        "removeOpponentNames": False,
    }


def test_location_formatted_address():
    location = Location(address="1 Main St", city="Toronto", postal_code=12345)
    assert location.formatted_address == "1 Main St Toronto 12345"
    assert Location(name="Rink").formatted_address is None


def test_token_response_defaults():
    tokens = TokenResponse.model_validate({"access_token": "a", "scope": "read"})
    assert tokens.refresh_token is None
    assert tokens.expires_in == 7200
