"""Application configuration and settings management."""

from typing import Any, Literal

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="DETOUR_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Detour Router API"
    api_prefix: str = "/api"
    clearance_meters: float = Field(
        default=7500.0,
        ge=0.0,
        description="Detour distance placed between each avoid-point and its detour waypoint.",
    )
    osrm_base_url: str = Field(
        default="https://router.project-osrm.org",
        description="Base URL for the OSRM routing service (e.g., http://localhost:5000).",
    )
    osrm_profile: Literal["driving", "driving-hgv"] = Field(
        default="driving",
        description="OSRM profile to use when computing routes.",
    )
    nominatim_base_url: str = Field(
        default="https://nominatim.openstreetmap.org",
        description="Base URL for the Nominatim geocoding service.",
    )
    geocode_country_codes: str = Field(
        default="in",
        description="Comma-separated ISO country codes used as a geocoding region hint. Empty disables it.",
    )
    http_timeout_seconds: float = Field(default=30.0, gt=0.0)
    max_sessions: int = Field(
        default=1000,
        ge=1,
        description="Plot sessions kept in memory; the least recently used idle one is evicted first.",
    )
    user_agent: str = Field(
        default="detour-router/0.1",
        description="User-Agent sent to Nominatim, which rejects anonymous clients.",
    )
    peace_of_mind_messages: tuple[str, ...] = Field(
        default=("Priceless", "Mission Accomplished", "Crisis Averted", "Serenity Restored"),
        description="Flavour messages shown in the route summary.",
    )
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    @field_validator("frontend_allowed_origins", "peace_of_mind_messages", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()

    @field_validator("osrm_base_url", "nominatim_base_url", mode="after")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


settings = Settings()
