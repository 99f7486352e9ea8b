"""Storage for team naming preferences."""

from teamfeed.constants import CUSTOM_NAME_KEY_PREFIX, REMOVE_OPPONENTS_KEY_PREFIX
from teamfeed.models.preferences import TeamPreferences
from teamfeed.storage.kv_store import KeyValueStore


class PreferenceStore:
    """Reads and writes per-team preferences. Entries never expire."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    def load(self, team_id: str) -> TeamPreferences:
        custom_name = self.store.get(f"{CUSTOM_NAME_KEY_PREFIX}{team_id}")
        remove_opponents = self.store.get(f"{REMOVE_OPPONENTS_KEY_PREFIX}{team_id}")
        return TeamPreferences(
            custom_name=custom_name or None,
            remove_opponent_names=remove_opponents == "true",
        )

    def save(
        self,
        team_id: str,
        custom_name: str | None,
        remove_opponent_names: bool | None = None,
    ) -> None:
        """
        Persist preferences.

        An empty custom name clears it. ``remove_opponent_names=None`` leaves
        the stored flag unchanged.
        """
        name_key = f"{CUSTOM_NAME_KEY_PREFIX}{team_id}"
        if custom_name:
            self.store.put(name_key, custom_name)
        else:
            self.store.delete(name_key)

        if remove_opponent_names is None:
            return
        flag_key = f"{REMOVE_OPPONENTS_KEY_PREFIX}{team_id}"
        if remove_opponent_names:
            self.store.put(flag_key, "true")
        else:
            self.store.delete(flag_key)
