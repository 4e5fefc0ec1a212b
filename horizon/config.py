"""Application configuration management."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping, Union

from pydantic import ValidationError

from horizon.errors import ConfigError, StoreError
from horizon.models import Configuration
from horizon.store import SETTINGS_KEY, JsonFileStore, Store

log = logging.getLogger(__name__)

_CONFIG_DIR = Path.home() / ".config" / "horizon"
_DB_DIR = Path.home() / ".local" / "share" / "horizon"

_STATE_FILE = _CONFIG_DIR / "state.json"


def get_state_path() -> Path:
    """Location of the JSON document holding settings and the timer snapshot."""
    return _STATE_FILE


def get_db_path() -> Path:
    """Location of the session history database (directory is created)."""
    _DB_DIR.mkdir(parents=True, exist_ok=True)
    return _DB_DIR / "horizon.db"


def default_store() -> JsonFileStore:
    return JsonFileStore(get_state_path())


def load_config(store: Store) -> Configuration:
    """Load settings from *store*, returning defaults if none exist or they are invalid."""
    try:
        raw = store.get(SETTINGS_KEY)
    except StoreError as exc:
        log.warning("Could not read settings, using defaults: %s", exc)
        return Configuration()
    if raw is None:
        return Configuration()
    try:
        return Configuration.model_validate_json(raw)
    except ValidationError as exc:
        log.warning("Stored settings are invalid, using defaults: %s", exc)
        return Configuration()


def validate_config(candidate: Union[Configuration, Mapping[str, Any]]) -> Configuration:
    """Turn *candidate* into a Configuration or raise ConfigError for the first bad field."""
    if isinstance(candidate, Configuration):
        return candidate
    try:
        return Configuration.model_validate(dict(candidate))
    except ValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or "configuration"
        raise ConfigError(field, first["msg"]) from exc


def apply_config(
    store: Store, candidate: Union[Configuration, Mapping[str, Any]]
) -> Configuration:
    """Validate and persist new settings. The stored settings are untouched on failure."""
    config = validate_config(candidate)
    save_config(store, config)
    return config


def save_config(store: Store, config: Configuration) -> None:
    """Write settings to *store*. Write failures are logged, not raised."""
    try:
        store.set(SETTINGS_KEY, config.model_dump_json())
    except StoreError as exc:
        log.warning("Could not save settings: %s", exc)
