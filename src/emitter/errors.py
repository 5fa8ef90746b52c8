class EmitterError(Exception):
    """Base error for emitter exceptions."""


class InvalidArgument(EmitterError, TypeError):
    """Raised when a listener is missing or not callable, or a race pair is malformed."""


class ConfigError(EmitterError, ValueError):
    """Raised when an emitter configuration value cannot be used."""
