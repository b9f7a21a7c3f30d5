"""
Settings for building a configuration context from the environment.

- Type-safe configuration with Pydantic v2
- Environment variable parsing with the ``BCTX_`` prefix
- Nested sections addressed with ``__`` (``BCTX_OBSERVABILITY__LOG_LEVEL``)
"""

import json
import logging
from functools import lru_cache
from typing import Annotated

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class ObservabilityConfig(BaseModel):
    """Configuration for logging."""

    log_level: str = Field("INFO")
    log_format: str = Field("console")  # console or json

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {v}")
        return level

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v):
        allowed = {"console", "json"}
        if v not in allowed:
            raise ValueError(f"log_format must be one of {allowed}")
        return v


class Settings(BaseSettings):
    """Main settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_prefix="BCTX_", env_nested_delimiter="__", case_sensitive=False, extra="ignore"
    )

    config_location: str | None = Field(
        None, description="Container definition resource (YAML or JSON)"
    )
    property_locations: Annotated[list[str], NoDecode] = Field(
        default_factory=list,
        description="Supplemental property resources, later ones override earlier ones",
    )
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    @field_validator("property_locations", mode="before")
    @classmethod
    def split_property_locations(cls, v):
        # Accept a JSON list or a comma-separated string from the environment
        if isinstance(v, str):
            stripped = v.strip()
            if stripped.startswith("["):
                return json.loads(stripped)
            return [part.strip() for part in stripped.split(",") if part.strip()]
        return v


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
