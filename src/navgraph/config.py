"""Analysis configuration loading.

Settings resolve in this order (later wins):
1. Built-in defaults
2. ``navgraph.yaml`` (or the file given with ``--config``)
3. Environment variables (``NAVGRAPH_TIMEOUT``, ``NAVGRAPH_MAX_WORKERS``)
4. CLI flags

Entry points and terminals left unset here fall back to the manifest, and
then to the framework-convention defaults.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML

DEFAULT_CONFIG_FILE = Path("navgraph.yaml")
ENV_TIMEOUT = "NAVGRAPH_TIMEOUT"
ENV_MAX_WORKERS = "NAVGRAPH_MAX_WORKERS"


class ConfigError(Exception):
    """Raised when analysis configuration cannot be loaded."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load config at {path}: {reason}")


def _optional_str_list(data: dict[str, Any], key: str) -> list[str] | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        msg = f"'{key}' must be a list of route paths"
        raise ValueError(msg)
    return list(value)


def _strict_bool(value: Any, name: str) -> bool:
    # Quoted "false" would otherwise be truthy.
    if not isinstance(value, bool):
        msg = f"'{name}' must be true or false, got {value!r}"
        raise ValueError(msg)
    return value


def _positive_float(value: Any, name: str) -> float | None:
    if value is None:
        return None
    result = float(value)
    if result <= 0:
        msg = f"'{name}' must be positive, got {value}"
        raise ValueError(msg)
    return result


def _positive_int(value: Any, name: str) -> int | None:
    if value is None:
        return None
    result = int(value)
    if result < 1:
        msg = f"'{name}' must be at least 1, got {value}"
        raise ValueError(msg)
    return result


@dataclass(frozen=True)
class AnalysisConfig:
    """Settings for one analysis run.

    Attributes:
        entry_points: Traversal roots overriding the manifest, if set.
        terminals: Allowed terminals overriding the manifest, if set.
        timeout_seconds: Cooperative analysis deadline. None disables it.
        max_workers: Thread pool size for journey validation.
        fail_on_dead_ends: Treat dead-ends as a failing result (exit 1).
    """

    entry_points: list[str] | None = None
    terminals: list[str] | None = None
    timeout_seconds: float | None = None
    max_workers: int | None = None
    fail_on_dead_ends: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AnalysisConfig:
        """Create config from dictionary.

        Args:
            data: Dictionary with any of the attribute names as keys.

        Returns:
            AnalysisConfig instance.

        Raises:
            ValueError: If a value has the wrong type or range.
        """
        return cls(
            entry_points=_optional_str_list(data, "entry_points"),
            terminals=_optional_str_list(data, "terminals"),
            timeout_seconds=_positive_float(data.get("timeout_seconds"), "timeout_seconds"),
            max_workers=_positive_int(data.get("max_workers"), "max_workers"),
            fail_on_dead_ends=_strict_bool(
                data.get("fail_on_dead_ends", False), "fail_on_dead_ends"
            ),
        )

    def with_env(self) -> AnalysisConfig:
        """Apply ``NAVGRAPH_*`` environment overrides.

        Raises:
            ValueError: If an environment value is malformed.
        """
        config = self
        timeout = os.getenv(ENV_TIMEOUT)
        if timeout:
            config = replace(config, timeout_seconds=_positive_float(timeout, ENV_TIMEOUT))
        workers = os.getenv(ENV_MAX_WORKERS)
        if workers:
            config = replace(config, max_workers=_positive_int(workers, ENV_MAX_WORKERS))
        return config

    def with_overrides(self, **overrides: Any) -> AnalysisConfig:
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)


def load_analysis_config(path: Path | None = None) -> AnalysisConfig:
    """Load analysis configuration and apply environment overrides.

    Args:
        path: Explicit config file. When None, ``./navgraph.yaml`` is used if
            it exists, otherwise defaults apply.

    Returns:
        AnalysisConfig instance.

    Raises:
        ConfigError: If an explicit file is missing, or any file is invalid.
    """
    config_path = path if path is not None else DEFAULT_CONFIG_FILE

    if not config_path.exists():
        if path is not None:
            raise ConfigError(config_path, "File not found")
        try:
            return AnalysisConfig().with_env()
        except ValueError as e:
            raise ConfigError(config_path, str(e)) from e

    yaml = YAML(typ="safe")
    try:
        with config_path.open("r", encoding="utf-8") as f:
            data = yaml.load(f)

        if data is None:
            return AnalysisConfig().with_env()
        if not isinstance(data, dict):
            raise ConfigError(config_path, "Expected a mapping at top level")

        return AnalysisConfig.from_dict(dict(data)).with_env()
    except Exception as e:
        if isinstance(e, ConfigError):
            raise
        raise ConfigError(config_path, str(e)) from e
