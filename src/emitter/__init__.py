"""In-process publish/subscribe emitter.

Exposes :func:`create` plus the emitter class, its configuration and errors.
"""

from .config import EmitterConfig, load_emitter_config
from .core import Emitter, create
from .errors import ConfigError, EmitterError, InvalidArgument
from .listeners import OnceListener, RaceGroup, RaceListener, RaceState
from .logging_config import configure_logging

__all__ = [
    "ConfigError",
    "Emitter",
    "EmitterConfig",
    "EmitterError",
    "InvalidArgument",
    "OnceListener",
    "RaceGroup",
    "RaceListener",
    "RaceState",
    "configure_logging",
    "create",
    "load_emitter_config",
]
