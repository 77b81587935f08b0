"""Pub/Sub configuration helpers.

Defaults are read from the environment (optionally through a ``.env`` file):
``PUBSUB_PROJECT``, ``PUBSUB_EMULATOR_HOST``, ``PUBSUB_TIMEOUT`` and the
first of ``PUBSUB_CREDENTIALS``, ``PUBSUB_CREDENTIALS_JSON``,
``PUBSUB_KEYFILE``, ``PUBSUB_KEYFILE_JSON`` that is set. The ``*_JSON``
variables hold the keyfile contents; the others hold a path to it.
"""

import json
import logging
import os
from dataclasses import dataclass, fields
from functools import lru_cache
from typing import Any, Dict, List, Optional, Union

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

CREDENTIAL_ENV_VARS = (
    "PUBSUB_CREDENTIALS",
    "PUBSUB_CREDENTIALS_JSON",
    "PUBSUB_KEYFILE",
    "PUBSUB_KEYFILE_JSON",
)

_ALIASES = {"project": "project_id", "keyfile": "credentials"}

_FIELD_TYPES = {
    "project_id": (str,),
    "credentials": (str, dict),
    "scope": (str, list),
    "timeout": (int,),
    "client_config": (dict,),
    "emulator_host": (str,),
}


class ConfigError(RuntimeError):
    """Raised when configuration values are malformed."""


@dataclass(frozen=True)
class PubsubSettings:
    project_id: Optional[str] = None
    credentials: Optional[Union[str, Dict[str, Any]]] = None
    scope: Optional[Union[str, List[str]]] = None
    timeout: Optional[int] = None
    client_config: Optional[Dict[str, Any]] = None
    emulator_host: Optional[str] = None

    def replace(self, **overrides: Any) -> "PubsubSettings":
        """Return a copy with ``overrides`` applied; ``None`` keeps the current value."""
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        for name, value in overrides.items():
            field_name = _ALIASES.get(name, name)
            if field_name not in _FIELD_TYPES:
                raise ConfigError(f"Unknown Pub/Sub setting: {name}")
            if value is None:
                continue
            _check_type(field_name, value)
            values[field_name] = value
        return PubsubSettings(**values)


def _check_type(name: str, value: Any) -> None:
    allowed = _FIELD_TYPES[name]
    # bool is an int subclass but never a valid timeout
    if isinstance(value, bool) or not isinstance(value, allowed):
        expected = " or ".join(t.__name__ for t in allowed)
        raise ConfigError(f"{name} must be {expected}, got {type(value).__name__}")


def credentials_from_env(*names: str) -> Optional[Union[str, Dict[str, Any]]]:
    for name in names:
        value = os.getenv(name)
        if not value:
            continue
        if not name.endswith("_JSON"):
            return value
        try:
            parsed = json.loads(value)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"{name} does not contain valid JSON: {exc}") from exc
        if not isinstance(parsed, dict):
            raise ConfigError(f"{name} must contain a JSON object")
        return parsed
    return None


def _timeout_from_env() -> Optional[int]:
    raw = os.getenv("PUBSUB_TIMEOUT")
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"PUBSUB_TIMEOUT must be an integer, got {raw!r}") from exc


@lru_cache(maxsize=1)
def get_pubsub_settings() -> PubsubSettings:
    """Load and cache the default Pub/Sub settings from the environment."""
    load_dotenv()

    project_id = os.getenv("PUBSUB_PROJECT") or None
    emulator_host = os.getenv("PUBSUB_EMULATOR_HOST") or None
    credentials = credentials_from_env(*CREDENTIAL_ENV_VARS)
    timeout = _timeout_from_env()

    if not project_id:
        logger.warning("PUBSUB_PROJECT is not set; the project must be passed explicitly.")
    if emulator_host:
        logger.info("Using Pub/Sub emulator at %s", emulator_host)

    return PubsubSettings(
        project_id=project_id,
        credentials=credentials,
        timeout=timeout,
        emulator_host=emulator_host,
    )
