"""Core configuration.

Why here:
- Centralizes environment variables (pydantic-settings) without polluting the CLI.
- Lets adapters (HTTP/files) read config consistently.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.domain.policy import BreedPolicy


class AppSettings(BaseSettings):
    """Central application settings.

    Why pydantic-settings:
    - Typed and validated at the edge (env vars) without leaking logic into the Core.
    - One configuration contract for CLI and adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="DOG_PICS_",
        extra="ignore",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    api_base_url: str = Field(
        default="https://dog.ceo/api",
        min_length=8,
        description="Base URL of the dog.ceo API (no trailing slash needed).",
    )
    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Per-request timeout (seconds).",
    )
    user_agent: str = Field(
        default="dog-pics/0.1",
        min_length=1,
        description="User-Agent sent to the API.",
    )

    breed_file: Path = Field(
        default=Path("dog.txt"),
        description="Text file holding the breed name.",
    )
    output_file: Path = Field(
        default=Path("dog-image.txt"),
        description="Text file overwritten with the image URL(s).",
    )
    breed_policy: BreedPolicy = Field(
        default=BreedPolicy.ENCODE,
        description="How unsafe characters in the breed are handled (encode/reject).",
    )
    max_concurrency: int = Field(
        default=3,
        ge=1,
        le=50,
        description="Upper bound of in-flight requests for batch fetches.",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING",
        description="Level for diagnostic logging (case-insensitive).",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: Any) -> Any:
        return value.strip().upper() if isinstance(value, str) else value
