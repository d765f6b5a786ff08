"""Run configuration for the force converter."""

from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Converter settings pulled from environment variables or a .env file."""

    model_config = SettingsConfigDict(
        env_prefix="FORCECONV_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Unit mapping
    mod: Optional[str] = Field(default=None, description="Source mod whose rule set to prefer")
    unit_mapping_file: Optional[str] = Field(
        default=None, description="Unit mapping rule sets (bundled file if unset)"
    )
    unit_types_file: Optional[str] = Field(
        default=None, description="Unit type catalog (bundled file if unset)"
    )

    # Practicals
    practicals_scale: float = Field(
        default=0.1, description="Practical points per converted regiment"
    )
    undo_queued_practicals: bool = Field(
        default=False, description="Withhold practicals of production queue units"
    )

    # Basing
    basing_strategy: Literal["random", "first"] = Field(
        default="random", description="How to pick among valid basing candidates"
    )
    basing_seed: Optional[int] = Field(
        default=None, description="Seed for random basing (unseeded if unset)"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="console", description="Logging format (console or json)")
