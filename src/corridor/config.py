"""Application configuration and settings management."""

from pathlib import Path
from typing import Any, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="CORRIDOR_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Corridor Buffer API"
    api_prefix: str = "/api"
    graph_file: Path = Field(
        default=Path("data/road_graph.geojson"),
        description="GeoJSON FeatureCollection describing the routing graph edges.",
    )
    default_query_multiplier: float = Field(
        default=0.01,
        gt=0.0,
        le=1.0,
        description="Base half-width (degrees) of the start search box.",
    )
    secondary_query_multiplier: float = Field(
        default=0.005,
        gt=0.0,
        le=1.0,
        description="Base half-width (degrees) of the opposite carriageway search box.",
    )
    max_walk_steps: int = Field(
        default=10_000,
        ge=1,
        description="Upper bound on edges visited by a single walk.",
    )
    copyrights: tuple[str, ...] = Field(
        default=("OpenStreetMap contributors",),
        description="Attribution strings attached to every FeatureCollection response.",
    )
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )
    log_level: Optional[str] = Field(default=None, description="Root log level applied at startup.")

    @field_validator("graph_file", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Path:
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @field_validator("copyrights", "frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            # Try JSON first
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
