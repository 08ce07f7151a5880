# motor_sysid/config/settings.py

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

import yaml

from ..research.regression import ModelSpec


DEFAULT_CONFIG = Path(__file__).resolve().parent / "sysid_default.yaml"


def _env_bool(key: str, default: bool) -> bool:
    """Read a boolean from environment variable."""
    val = os.environ.get(key, "").lower()
    if val in ("1", "true", "yes", "on"):
        return True
    if val in ("0", "false", "no", "off"):
        return False
    return default


@dataclass
class ModelSettings:
    include_static_friction: bool = True
    include_acceleration: bool = True

    def to_spec(self) -> ModelSpec:
        return ModelSpec(
            include_static_friction=self.include_static_friction,
            include_acceleration=self.include_acceleration,
        )


@dataclass
class ExportSettings:
    precision: int = 6
    path: Optional[str] = None     # no export when unset


@dataclass
class LoggingSettings:
    log_dir: str = "logs"
    console: bool = False
    level: Union[str, int] = "INFO"

    def __post_init__(self):
        if isinstance(self.level, str):
            self.level = self.level.upper()
            if not isinstance(logging.getLevelName(self.level), int):
                raise ValueError(f"unknown log level {self.level!r}")

    @property
    def level_no(self) -> int:
        if isinstance(self.level, int):
            return self.level
        return logging.getLevelName(self.level)


@dataclass
class SysIdSettings:
    model: ModelSettings = field(default_factory=ModelSettings)
    export: ExportSettings = field(default_factory=ExportSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)
    acceleration_history: int = 10

    @classmethod
    def load(cls, path: Optional[Union[str, Path]] = None) -> "SysIdSettings":
        """
        Load settings from YAML (the bundled defaults when path is None).

        SYSID_STATIC_FRICTION / SYSID_ACCELERATION override the model terms.
        """
        cfg_path = Path(path) if path is not None else DEFAULT_CONFIG
        data = yaml.safe_load(cfg_path.read_text()) or {}

        model = ModelSettings(**(data.get("model") or {}))
        model.include_static_friction = _env_bool("SYSID_STATIC_FRICTION", model.include_static_friction)
        model.include_acceleration = _env_bool("SYSID_ACCELERATION", model.include_acceleration)

        return cls(
            model=model,
            export=ExportSettings(**(data.get("export") or {})),
            logging=LoggingSettings(**(data.get("logging") or {})),
            acceleration_history=int(data.get("acceleration_history") or 10),
        )
