"""
Configuration management for axisplan.

Motion configurations are validated with pydantic and can be stored as named
YAML profiles on disk.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from axisplan.core.exceptions import ConfigurationError

DEFAULT_SOLUTIONS_TO_SEED = 50
DEFAULT_MIN_IK_SCORE = 0.0
DEFAULT_SMOOTH_ITER = 200
DEFAULT_RESOLUTION = 0.05
DEFAULT_TIMEOUT = 300.0
DEFAULT_PLANNING_ALG = "direct"
DEFAULT_NUM_THREADS = max((os.cpu_count() or 2) // 2, 1)


class MotionConfig(BaseModel):
    """
    Per-waypoint motion configuration.

    Unknown keys are rejected so typos fail loudly instead of silently
    falling back to defaults.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    num_threads: int = Field(default=DEFAULT_NUM_THREADS, ge=1)
    max_ik_solutions: int = Field(default=DEFAULT_SOLUTIONS_TO_SEED, ge=0)
    min_ik_score: float = Field(default=DEFAULT_MIN_IK_SCORE, ge=0.0)
    smooth_iter: int = Field(default=DEFAULT_SMOOTH_ITER, ge=0)
    resolution: float = Field(default=DEFAULT_RESOLUTION, gt=0.0)
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0.0)
    planning_alg: str = DEFAULT_PLANNING_ALG
    constraints: dict[str, Callable[..., Any]] = Field(default_factory=dict)

    @classmethod
    def from_value(cls, value: "MotionConfig | dict[str, Any] | None") -> "MotionConfig":
        """
        Build a MotionConfig from a mapping, an instance, or nothing.

        Raises:
            ConfigurationError: If the mapping does not validate
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(**(value or {}))
        except ValidationError as e:
            raise ConfigurationError(
                "Invalid motion configuration",
                details={"error": str(e)},
            ) from e


@dataclass
class ConfigManager:
    """
    Loads named motion profiles from YAML files.

    Each ``profiles/<name>.yaml`` file holds a top-level ``motion`` mapping
    with MotionConfig fields.

    Example:
        >>> config = ConfigManager(config_dir=Path("config"))
        >>> precise = config.get_profile("precise")
    """

    config_dir: Path
    _profiles: dict[str, MotionConfig] = field(default_factory=dict, init=False)
    _loaded: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        self.config_dir = Path(self.config_dir)
        if not self.config_dir.exists():
            raise ConfigurationError(
                f"Configuration directory not found: {self.config_dir}"
            )

    def load(self) -> None:
        """Load all profiles from disk."""
        profiles_dir = self.config_dir / "profiles"
        if profiles_dir.exists():
            for config_file in sorted(profiles_dir.glob("*.yaml")):
                try:
                    with open(config_file) as f:
                        data = yaml.safe_load(f)
                except yaml.YAMLError as e:
                    raise ConfigurationError(
                        f"Failed to load motion profile: {config_file}",
                        details={"error": str(e)},
                    ) from e

                if data and "motion" in data:
                    try:
                        self._profiles[config_file.stem] = MotionConfig(**data["motion"])
                    except ValidationError as e:
                        raise ConfigurationError(
                            f"Invalid motion profile: {config_file}",
                            details={"error": str(e)},
                        ) from e
        self._loaded = True

    def get_profile(self, name: str) -> MotionConfig:
        """
        Get a motion profile by name.

        Args:
            name: Profile name (without .yaml extension)

        Returns:
            MotionConfig instance

        Raises:
            ConfigurationError: If the profile is not found
        """
        if not self._loaded:
            self.load()

        if name not in self._profiles:
            raise ConfigurationError(
                f"Motion profile not found: {name}",
                details={"available": list(self._profiles.keys())},
            )
        return self._profiles[name]

    def list_profiles(self) -> list[str]:
        """List available motion profiles."""
        if not self._loaded:
            self.load()
        return list(self._profiles.keys())
