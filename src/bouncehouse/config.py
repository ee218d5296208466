"""Application configuration and settings management."""

from pathlib import Path
from typing import Any, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="BHK_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Bounce House Kids API"
    api_prefix: str = "/api"
    log_level: str = "INFO"
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    # Tenant resolution
    platform_domain: str = Field(
        default="bouncehousekids.com",
        description="Root domain; hosts under it are resolved by subdomain, anything else as a custom domain.",
    )
    reserved_subdomains: tuple[str, ...] = Field(
        default=("www", "api"),
        description="Subdomains of the platform domain that never map to a company.",
    )

    # Geocoding
    google_maps_api_key: Optional[str] = Field(
        default=None,
        description="Google Maps Geocoding API key. Enables the Google provider when set.",
    )
    zippopotam_enabled: bool = Field(default=True, description="Look up zip codes via api.zippopotam.us first.")
    geocode_cascade_on_failure: bool = Field(
        default=False,
        description="When true, a provider returning no coordinates hands the query to the next provider.",
    )
    geocode_timeout_seconds: float = Field(default=10.0, gt=0.0)
    google_geocode_url: str = "https://maps.googleapis.com/maps/api/geocode/json"
    nominatim_url: str = "https://nominatim.openstreetmap.org/search"
    nominatim_user_agent: str = "bouncehousekids-api/1.0"
    zippopotam_url: str = "http://api.zippopotam.us/us"
    coordinate_batch_delay_seconds: float = Field(
        default=1.0,
        ge=0.0,
        description="Pause between companies during batch coordinate updates (provider rate limits).",
    )

    # Supabase configuration
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL (e.g., https://xxx.supabase.co).",
    )
    supabase_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key for backend operations.",
    )
    companies_file: Path = Field(
        default=Path("data/companies.json"),
        description="Company seed data used when Supabase is not configured.",
    )

    @field_validator("companies_file", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Path:
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @field_validator("platform_domain", mode="before")
    @classmethod
    def _normalize_domain(cls, value: Any) -> str:
        return str(value).strip().lower().rstrip(".")

    @field_validator("google_maps_api_key", mode="before")
    @classmethod
    def _blank_key_is_none(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @field_validator("frontend_allowed_origins", "reserved_subdomains", mode="before")
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


settings = Settings()
