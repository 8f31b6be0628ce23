"""Core ssdlife functionality."""

from ssdlife.core.config import Config, ConfigError, load_config
from ssdlife.core.context import Context
from ssdlife.core.logging import NullLogger, RunLogger
from ssdlife.core.output import Output

__all__ = [
    "Config",
    "ConfigError",
    "Context",
    "NullLogger",
    "Output",
    "RunLogger",
    "load_config",
]
