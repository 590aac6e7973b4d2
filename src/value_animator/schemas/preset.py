"""
Preset schemas - Pydantic models for animation presets loaded from YAML
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Dict

from value_animator.models.easing import EASINGS
from value_animator.models.enums import LogLevel


class AnimationPresetSchema(BaseModel):
    """One named animation preset"""
    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "example": {
                "start_value": 0,
                "end_value": 100,
                "duration": 1000,
                "easing": "ease_in_out_quad",
                "fps": 60,
            }
        },
    )

    start_value: float = Field(description="Value at progress 0")
    end_value: float = Field(description="Value at progress 1")
    duration: float = Field(ge=0, description="Duration in milliseconds")
    easing: str = Field("linear", description="Easing function name")
    fps: float = Field(60, gt=0, description="Target ticks per second")
    enable_start_value_frame: bool = True
    enable_end_value_frame: bool = True
    enabled: bool = True
    description: str = ""

    @field_validator("easing")
    @classmethod
    def _known_easing(cls, value: str) -> str:
        if value not in EASINGS:
            raise ValueError(f"unknown easing '{value}' (known: {', '.join(EASINGS)})")
        return value


class LoggingSchema(BaseModel):
    """Logger settings"""
    model_config = ConfigDict(extra="forbid")

    level: str = Field("INFO", description="DEBUG, INFO, WARN or ERROR")
    colors: bool = True

    @field_validator("level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        value = value.upper()
        if value not in LogLevel.__members__:
            raise ValueError(f"unknown log level '{value}'")
        return value

    @property
    def log_level(self) -> LogLevel:
        return LogLevel[self.level]


class ConfigFileSchema(BaseModel):
    """Merged configuration (after include resolution)"""
    logging: LoggingSchema = Field(default_factory=LoggingSchema)
    animations: Dict[str, dict] = Field(default_factory=dict)
