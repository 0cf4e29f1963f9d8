"""Configuration loader for the courier agent.

Loads configuration from YAML files and environment variables.
Environment variables override YAML values using the COURIER_ prefix.
Nested keys use double underscores: COURIER_DELIVERY__BLOCKED_TIMEOUT=5
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from src.core.loop import LoopConfig
from src.strategy.delivery import DeliveryConfig

ENV_PREFIX = "COURIER_"


class DeliverySettings(BaseModel):
    """Delivery strategy settings."""

    delivery_threshold: float = Field(default=10.0, ge=0.0, description="Minimum reward for a detour")
    max_detour_distance: int = Field(default=5, ge=0, le=1000, description="Extra steps a detour may add")
    blocked_timeout: int = Field(default=3, ge=1, le=1000, description="Turns to wait on a blocked tile")
    emit_events: bool = Field(default=True, description="Log and publish decision events")

    def to_strategy_config(self) -> DeliveryConfig:
        return DeliveryConfig(
            delivery_threshold=self.delivery_threshold,
            max_detour_distance=self.max_detour_distance,
            blocked_timeout=self.blocked_timeout,
            emit_events=self.emit_events,
        )


class PathfindingSettings(BaseModel):
    """Pathfinder settings."""

    avoid_agents: bool = Field(default=False, description="Route around cells occupied by agents")


class LoopSettings(BaseModel):
    """Turn loop settings."""

    max_turns: int = Field(default=200, ge=1, le=1_000_000)
    stop_when_idle: bool = Field(default=True)

    def to_loop_config(self) -> LoopConfig:
        return LoopConfig(max_turns=self.max_turns, stop_when_idle=self.stop_when_idle)


class LoggingConfig(BaseModel):
    """Logging settings."""

    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    format: str = Field(default="readable", pattern="^(readable|json)$")


class Config(BaseModel):
    """Root configuration model."""

    delivery: DeliverySettings = Field(default_factory=DeliverySettings)
    pathfinding: PathfindingSettings = Field(default_factory=PathfindingSettings)
    loop: LoopSettings = Field(default_factory=LoopSettings)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def _get_env_value(key: str) -> str | None:
    """Get environment variable with COURIER_ prefix."""
    env_key = f"{ENV_PREFIX}{key.upper()}"
    return os.environ.get(env_key)


def _apply_env_overrides(
    data: dict[str, Any],
    prefix: str = "",
    types: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Apply environment variable overrides to config data.

    Environment variables use COURIER_ prefix with double underscores for nesting.
    Example: COURIER_LOOP__MAX_TURNS=50 sets loop.max_turns to 50

    Args:
        data: Merged config data.
        prefix: Nested key prefix for the current section.
        types: Default values whose types drive conversion. YAML writes
            `10` for a float setting, so the merged value alone is not enough.
    """
    result = data.copy()
    types = types or {}

    for key, value in result.items():
        env_key = f"{prefix}__{key}" if prefix else key
        reference = types.get(key, value)

        if isinstance(value, dict):
            nested_types = reference if isinstance(reference, dict) else None
            result[key] = _apply_env_overrides(value, env_key, nested_types)
        else:
            env_value = _get_env_value(env_key)
            if env_value is not None:
                # Convert to the type of the default value
                if isinstance(reference, bool):
                    result[key] = env_value.lower() in ("true", "1", "yes")
                elif isinstance(reference, int):
                    result[key] = int(env_value)
                elif isinstance(reference, float):
                    result[key] = float(env_value)
                else:
                    result[key] = env_value

    return result


def load_config(config_path: str | Path | None = None) -> Config:
    """Load configuration from YAML file with environment variable overrides.

    Sections or keys missing from the file take their defaults and can
    still be overridden from the environment.

    Args:
        config_path: Path to YAML config file. If None, uses default.yaml.

    Returns:
        Validated Config object.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValidationError: If config values are invalid.
    """
    if config_path is None:
        project_root = Path(__file__).parent.parent.parent
        config_path = project_root / "configs" / "default.yaml"
    else:
        config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        data = yaml.safe_load(f) or {}

    # Start from defaults so every known key is eligible for an override
    defaults = get_default_config().model_dump()
    merged = _deep_merge(defaults, data)
    merged = _apply_env_overrides(merged, types=defaults)

    return Config.model_validate(merged)


def get_default_config() -> Config:
    """Get default configuration without loading from file."""
    return Config()


def _deep_merge(base: dict[str, Any], updates: dict[str, Any]) -> dict[str, Any]:
    """Deep merge updates into base dict."""
    result = base.copy()

    for key, value in updates.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result
