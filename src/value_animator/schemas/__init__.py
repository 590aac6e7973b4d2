"""Pydantic schemas for YAML configuration files"""

from .preset import AnimationPresetSchema, LoggingSchema, ConfigFileSchema

__all__ = ["AnimationPresetSchema", "LoggingSchema", "ConfigFileSchema"]
