"""Pydantic models for validation."""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .linear_model import Example


class ExampleModel(BaseModel):
    """Validated raw training record."""

    model_config = ConfigDict(extra="ignore")

    features: dict[int, float] = Field(default_factory=dict)
    label: int = Field(description="True label, +1 or -1")

    @field_validator("label")
    @classmethod
    def _check_label(cls, value: int) -> int:
        if value not in (1, -1):
            raise ValueError("label must be +1 or -1")
        return value

    @field_validator("features")
    @classmethod
    def _check_features(cls, value: dict[int, float]) -> dict[int, float]:
        for feature_id, weight in value.items():
            if not math.isfinite(weight):
                raise ValueError(f"feature {feature_id} has non-finite value {weight!r}")
        return value

    def to_example(self) -> Example:
        return Example(features=dict(self.features), label=self.label)
