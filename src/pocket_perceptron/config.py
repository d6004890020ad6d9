"""Configuration management for the online classifier."""

from __future__ import annotations

from pathlib import Path

import tomllib

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .ema import DEFAULT_WINDOW
from .threshold import DEFAULT_THRESHOLD_STEP


class LoggingConfig(BaseModel):
    """Logging configuration settings."""

    # Logging severity threshold (INFO/DEBUG/etc.).
    level: str = Field(default="INFO", description="Logging level")
    # Emit JSON if True; otherwise emit a human-readable format.
    json_format: bool = Field(default=True, description="Emit JSON logs")
    # Optional file path for log output; if None, logs go to stderr.
    log_file: str | None = Field(default=None, description="Optional log file path")
    # Maximum size (bytes) before log rotation.
    max_bytes: int = Field(default=1_000_000, ge=1, description="Max log file size before rotation")
    # Number of backup files to retain.
    backup_count: int = Field(default=3, ge=0, description="Number of rotated log files to keep")


class ClassifierConfig(BaseModel):
    """Training hyperparameters for the pocket perceptron."""

    learning_rate: float = Field(default=0.1, gt=0.0, description="Perceptron learning rate (eta)")
    # Scale eta by the opposite class count estimate on each update.
    adaptive_learning_rate: bool = Field(default=False, description="Per-class learning rate")
    ema_window: int = Field(default=DEFAULT_WINDOW, ge=1, description="EMA window in examples")
    # None disables threshold adaptation.
    target_precision: float | None = Field(default=None, ge=0.0, le=1.0, description="Target precision")
    threshold_step: float = Field(default=DEFAULT_THRESHOLD_STEP, ge=0.0, description="Threshold step size")
    # Compare scores against bias + adaptive threshold instead of bias alone.
    threshold_in_decision: bool = Field(default=False, description="Use the adaptive threshold when deciding")


class PocketPerceptronSettings(BaseSettings):
    """Configuration settings loaded from env or optional TOML."""

    # Environment keys use POCKET_ prefix and "__" nesting.
    model_config = SettingsConfigDict(env_prefix="POCKET_", env_nested_delimiter="__", extra="ignore")

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    classifier: ClassifierConfig = Field(default_factory=ClassifierConfig)
    # Path prefix for the <prefix>.model and <prefix>.log files; None keeps state in memory.
    state_prefix: str | None = Field(default=None, description="Model/checkpoint path prefix")

    @classmethod
    def from_toml(cls, path: str | Path) -> "PocketPerceptronSettings":
        data = tomllib.loads(Path(path).read_text())
        return cls.model_validate(data)
