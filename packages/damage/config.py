"""
Combat configuration - global tuning values read by the damage engine.

CombatConfig is an immutable value. Live balance tuning goes through
LiveCombatConfig, which hands out a consistent snapshot per computation.

Sources:
- keyword arguments / CombatConfig.from_dict()
- JSON file (CombatConfig.from_json)
- environment, optionally seeded from a .env file (CombatConfig.from_env)
"""

from __future__ import annotations

import json
import logging
import math
import os
import threading
from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Dict, Mapping, Optional, Union

from dotenv import load_dotenv

__all__ = [
    "CombatConfig",
    "LiveCombatConfig",
    "ConfigError",
    "ConfigSource",
    "DEFAULT_CRITICAL_CHANCE",
    "DEFAULT_CRITICAL_MODIFIER",
    "DEFAULT_WEAK_MODIFIER",
    "DEFAULT_BREAK_MODIFIER",
    "resolve_config",
]

logger = logging.getLogger(__name__)


# =============================================================================
# DEFAULTS
# =============================================================================

DEFAULT_CRITICAL_CHANCE = 0.05
DEFAULT_CRITICAL_MODIFIER = 1.5

# Weak - reduces damage dealt by 25%
DEFAULT_WEAK_MODIFIER = 0.75
# Break - increases damage taken by 25%
DEFAULT_BREAK_MODIFIER = 1.25

ENV_PREFIX = "DAMAGE_"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class ConfigError(ValueError):
    """Invalid configuration value or unreadable configuration source."""


@dataclass(frozen=True)
class CombatConfig:
    """
    Global combat tuning.

    Attributes:
        critical_hits_enabled: Master switch for crit rolls
        base_critical_chance: Crit chance before CriticalUp, in [0, 1]
        critical_hit_modifier: Damage multiplier on a crit (typically > 1)
        weak_status_modifier: Outgoing multiplier for a Weak combatant
        break_status_modifier: Incoming multiplier for a Broken combatant
    """

    critical_hits_enabled: bool = True
    base_critical_chance: float = DEFAULT_CRITICAL_CHANCE
    critical_hit_modifier: float = DEFAULT_CRITICAL_MODIFIER
    weak_status_modifier: float = DEFAULT_WEAK_MODIFIER
    break_status_modifier: float = DEFAULT_BREAK_MODIFIER

    def __post_init__(self):
        # NaN fails this range check too
        if not 0.0 <= self.base_critical_chance <= 1.0:
            raise ConfigError(
                f"base_critical_chance must be in [0, 1], got {self.base_critical_chance}"
            )
        for name in ("critical_hit_modifier", "weak_status_modifier", "break_status_modifier"):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise ConfigError(f"{name} must be finite, got {value}")
            if value < 0:
                raise ConfigError(f"{name} cannot be negative, got {value}")

    # -------------------------------------------------------------------------
    # Loaders
    # -------------------------------------------------------------------------

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CombatConfig:
        """Build from a mapping of field names; unknown keys are rejected."""
        known = {f.name: f for f in fields(cls)}
        unknown = sorted(set(data) - set(known))
        if unknown:
            raise ConfigError(f"Unknown combat config keys: {', '.join(unknown)}")

        values: Dict[str, Any] = {}
        for key, raw in data.items():
            if known[key].type in ("bool", bool):
                values[key] = _parse_bool(key, raw)
            else:
                values[key] = _parse_float(key, raw)
        return cls(**values)

    @classmethod
    def from_json(cls, path: str) -> CombatConfig:
        """Load from a JSON object file."""
        try:
            with open(path) as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Cannot read combat config {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Combat config {path} must contain a JSON object")
        logger.info(f"Loaded combat config from {path}")
        return cls.from_dict(data)

    @classmethod
    def from_env(
        cls,
        prefix: str = ENV_PREFIX,
        dotenv_path: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> CombatConfig:
        """
        Load from environment variables named ``<prefix><FIELD_NAME>``.

        A .env file is loaded first (without overriding variables that are
        already set). Fields with no variable keep their defaults.

        Args:
            prefix: Variable name prefix (default "DAMAGE_")
            dotenv_path: Explicit .env file; None searches from the working directory
            environ: Mapping to read instead of os.environ (skips .env loading)
        """
        if environ is None:
            load_dotenv(dotenv_path=dotenv_path)
            environ = os.environ

        data = {}
        for f in fields(cls):
            key = f"{prefix}{f.name.upper()}"
            if key in environ:
                data[f.name] = environ[key]
        return cls.from_dict(data)

    def with_changes(self, **changes: Any) -> CombatConfig:
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class LiveCombatConfig:
    """
    Mutable holder for a live-tunable CombatConfig.

    Readers take a snapshot() once at the start of a computation and use
    that value throughout, so an update() mid-computation is never observed
    halfway.
    """

    def __init__(self, initial: Optional[CombatConfig] = None):
        self._config = initial or CombatConfig()
        self._lock = threading.Lock()

    def snapshot(self) -> CombatConfig:
        with self._lock:
            return self._config

    def update(self, **changes: Any) -> CombatConfig:
        """Apply field changes atomically; invalid values leave the config untouched."""
        with self._lock:
            updated = replace(self._config, **changes)
            self._config = updated
        logger.info(f"Combat config updated: {changes}")
        return updated

    def set_config(self, config: CombatConfig) -> None:
        with self._lock:
            self._config = config


ConfigSource = Union[CombatConfig, LiveCombatConfig]


def resolve_config(source: Optional[ConfigSource]) -> CombatConfig:
    """Read a config source once, as of now."""
    if source is None:
        return CombatConfig()
    if isinstance(source, LiveCombatConfig):
        return source.snapshot()
    return source


def _parse_bool(key: str, raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str):
        lowered = raw.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
    raise ConfigError(f"{key} must be a boolean, got {raw!r}")


def _parse_float(key: str, raw: Any) -> float:
    if isinstance(raw, bool):
        raise ConfigError(f"{key} must be a number, got {raw!r}")
    try:
        return float(raw)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{key} must be a number, got {raw!r}") from e
