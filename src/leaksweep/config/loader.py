"""Load and validate the config document, applying env var overrides."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from leaksweep.config.schema import (
    AuditOptions,
    EntropyConfig,
    LeakSweepConfig,
    RuleEntry,
    WhitelistConfig,
)

CONFIG_ENV_VAR = "LEAKSWEEP_CONFIG"
REPO_CONFIG_NAME = ".leaksweep.toml"


class ConfigurationError(Exception):
    """Raised when config is malformed, unreadable or fails validation."""


def find_config_file(
    repo_root: Optional[Path] = None, override: Optional[str] = None
) -> Optional[Path]:
    """Locate the config file: *override*, then $LEAKSWEEP_CONFIG, then the repo."""
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigurationError(f"no config at {override}")
        return p
    if env_path := os.environ.get(CONFIG_ENV_VAR):
        p = Path(env_path)
        if not p.is_file():
            raise ConfigurationError(f"no config at {env_path} (from ${CONFIG_ENV_VAR})")
        return p
    if repo_root is not None:
        candidate = repo_root / REPO_CONFIG_NAME
        if candidate.is_file():
            return candidate
    return None


def _parse_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigurationError(f"problem loading config {path}: {exc}") from exc


def _build_section(data: Dict[str, Any], cls: type, section: Optional[str] = None):
    """Build a dataclass from a TOML table, ignoring unknown keys."""
    import dataclasses

    table = data.get(section, {}) if section else data
    if not isinstance(table, dict):
        raise ConfigurationError(f"[{section or cls.__name__}] must be a table")
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in table.items() if k in valid_fields}
    return cls(**filtered)


def parse_config(raw: Dict[str, Any]) -> LeakSweepConfig:
    """Turn a decoded TOML document into a validated LeakSweepConfig."""
    rules = raw.get("rules", [])
    if not isinstance(rules, list):
        raise ConfigurationError("[[rules]] must be an array of tables")
    cfg = LeakSweepConfig(
        title=raw.get("title", "leaksweep config"),
        rules=[_build_section(entry, RuleEntry) for entry in rules],
        entropy=_build_section(raw, EntropyConfig, "entropy"),
        whitelist=_build_section(raw, WhitelistConfig, "whitelist"),
    )
    validate(cfg)
    return cfg


def validate(cfg: LeakSweepConfig) -> None:
    """Compile every pattern and parse every entropy range once, up front."""
    from leaksweep.rules.ruleset import build_ruleset
    from leaksweep.scanner.whitelist import WhitelistEngine

    build_ruleset(cfg)
    WhitelistEngine.from_config(cfg.whitelist)


def load_config(
    repo_root: Optional[Path] = None,
    config_override: Optional[str] = None,
) -> LeakSweepConfig:
    """Load, validate and return a LeakSweepConfig (built-in default if none found)."""
    from leaksweep.config.defaults import DEFAULT_TOML

    config_path = find_config_file(repo_root, config_override)
    if config_path is None:
        raw = tomllib.loads(DEFAULT_TOML)
    else:
        raw = _parse_toml(config_path)
    return parse_config(raw)


def apply_env_overrides(options: AuditOptions) -> None:
    """Apply LEAKSWEEP_* environment variable overrides to *options*."""
    if val := os.environ.get("LEAKSWEEP_CONCURRENCY"):
        try:
            options.concurrency = max(1, int(val))
        except ValueError:
            pass
    if os.environ.get("LEAKSWEEP_REDACT") == "1":
        options.redact = True
