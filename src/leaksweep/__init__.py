"""leaksweep — audit git history for committed secrets."""

__version__ = "0.3.0"
