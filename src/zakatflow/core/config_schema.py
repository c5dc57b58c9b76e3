"""Pydantic models for config validation.

Opt-in schema validation for ``Config.config_data``.  Call
``Config.validated()`` to obtain a typed, validated ``ZakatFlowConfig``
instance.  Dict-based ``Config.get()`` access keeps working unchanged.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

_LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


class PathsConfig(BaseModel):
    """File-system paths used by the application."""

    data_dir: Path
    log_dir: Path | None = None

    @field_validator("data_dir", "log_dir", mode="before")
    @classmethod
    def _expand_user(cls, v: Any) -> Any:
        if isinstance(v, str):
            return Path(v).expanduser()
        if isinstance(v, Path):
            return v.expanduser()
        return v


class LoggingConfig(BaseModel):
    """Loguru sink settings."""

    level: str = "WARNING"
    file: str | None = None

    @field_validator("level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        level = v.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"unknown log level {v!r}, expected one of {', '.join(_LOG_LEVELS)}")
        return level


class PricingConfig(BaseModel):
    """Metal spot prices (per troy ounce) for the nisab threshold."""

    silver_per_ounce: float = Field(24.50, gt=0)
    gold_per_ounce: float = Field(2650.00, gt=0)


class CalculationConfig(BaseModel):
    """Defaults applied when an input does not choose for itself."""

    methodology: str = "bradford"
    nisab_standard: str = "silver"
    calendar_type: str = "lunar"
    currency: str = "USD"

    @field_validator("methodology")
    @classmethod
    def _known_methodology(cls, v: str) -> str:
        from zakatflow.financial.calculators.methodology import parse_methodology

        return parse_methodology(v).value

    @field_validator("nisab_standard")
    @classmethod
    def _known_standard(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in ("silver", "gold"):
            raise ValueError(f"nisab_standard must be 'silver' or 'gold', got {v!r}")
        return v

    @field_validator("calendar_type")
    @classmethod
    def _known_calendar(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in ("lunar", "solar"):
            raise ValueError(f"calendar_type must be 'lunar' or 'solar', got {v!r}")
        return v


class LayoutConfig(BaseModel):
    """Flow-diagram geometry, in pixels."""

    width: float = Field(800, gt=0)
    height: float = Field(500, gt=0)
    node_width: float = Field(16, ge=0)
    padding: float = Field(40, ge=0)
    top_margin: float = Field(30, ge=0)
    bottom_margin: float = Field(30, ge=0)
    gap: float = Field(8, ge=0)
    power_exponent: float = Field(0.6, gt=0, le=1)

    @model_validator(mode="after")
    def _room_to_draw(self) -> LayoutConfig:
        if self.top_margin + self.bottom_margin >= self.height:
            raise ValueError("top_margin + bottom_margin must be less than height")
        return self


class ZakatFlowConfig(BaseModel):
    """Root configuration model.

    Uses ``extra="allow"`` so applications can add their own sections
    without touching this schema.
    """

    model_config = ConfigDict(extra="allow")

    paths: PathsConfig = PathsConfig(data_dir=Path("~/.zakatflow"))
    logging: LoggingConfig = LoggingConfig()
    pricing: PricingConfig = PricingConfig()
    calculation: CalculationConfig = CalculationConfig()
    layout: LayoutConfig = LayoutConfig()
