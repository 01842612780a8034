"""Configuration loading, schema, and defaults."""

from leaksweep.config.loader import ConfigurationError, load_config
from leaksweep.config.schema import AuditOptions, LeakSweepConfig

__all__ = [
    "AuditOptions",
    "ConfigurationError",
    "LeakSweepConfig",
    "load_config",
]
