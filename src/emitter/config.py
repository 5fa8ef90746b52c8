from __future__ import annotations

import logging
from dataclasses import dataclass
from importlib.resources import files as resource_files
from typing import Any, Mapping, Optional

import yaml

from .errors import ConfigError

logger = logging.getLogger(__name__)

PROPAGATE = "propagate"
ISOLATE = "isolate"
LISTENER_ERROR_POLICIES = (PROPAGATE, ISOLATE)


@dataclass(frozen=True)
class EmitterConfig:
    """Behaviour switches for an :class:`~emitter.core.Emitter`.

    - listener_errors: ``"propagate"`` lets an exception raised by a listener
      escape ``emit`` and skips the listeners after it; ``"isolate"`` logs it
      and carries on with the rest of the emission.
    """

    listener_errors: str = PROPAGATE

    def __post_init__(self) -> None:
        if self.listener_errors not in LISTENER_ERROR_POLICIES:
            raise ConfigError(
                f"listener_errors must be one of {LISTENER_ERROR_POLICIES}, got {self.listener_errors!r}"
            )

    @property
    def isolate_listener_errors(self) -> bool:
        return self.listener_errors == ISOLATE

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "EmitterConfig":
        """Build a config from a mapping. Missing keys fall back to defaults."""
        if "listener_errors" not in raw:
            logger.warning("No listener_errors configured; defaulting to '%s'", PROPAGATE)
        policy = str(raw.get("listener_errors", PROPAGATE)).strip().lower()
        return cls(listener_errors=policy)


DEFAULTS_RESOURCE = "defaults.yaml"


def _read_config_text(path: Optional[str]) -> str:
    if path is None:
        logger.debug("Reading bundled %s", DEFAULTS_RESOURCE)
        return resource_files("emitter").joinpath(DEFAULTS_RESOURCE).read_text(encoding="utf-8")
    logger.debug("Reading emitter config file %s", path)
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def load_emitter_config(path: Optional[str] = None) -> EmitterConfig:
    """Build an :class:`EmitterConfig` from a YAML document.

    The document must be a mapping; an empty one yields the defaults. Without
    ``path`` the copy bundled with the package is used.

    Raises:
        ConfigError: if the document is not a mapping or names an unknown policy.
        FileNotFoundError: if ``path`` does not exist.
    """
    raw = yaml.safe_load(_read_config_text(path)) or {}
    if not isinstance(raw, Mapping):
        raise ConfigError(f"Emitter config must be a mapping, got {type(raw).__name__}")
    config = EmitterConfig.from_dict(raw)
    logger.info("Emitter config: listener_errors=%s", config.listener_errors)
    return config
