class EmmetError(Exception):
    """Base class for errors raised by emmetpy."""


class ConfigError(EmmetError, ValueError):
    """Invalid configuration: unreadable config file, bad tables, unusable cache directory."""
