"""Mini README: Centralised configuration models and helpers for the guide.

Structure:
    * GuideSettings - Pydantic model describing runtime configuration.
    * get_settings - cached accessor for environment-aware settings.

Usage:
    Import ``get_settings`` to read environment variables (prefixed with
    ``MUSEGUIDE_``) or a local ``.env`` file. Visitor preferences such as the
    story mode and language are consumed read-only by the core; persisting
    them is the host application's job. The configuration is cached so the
    cost of validation is incurred only once per process.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, validator
from pydantic_settings import BaseSettings


class GuideSettings(BaseSettings):
    """Runtime configuration for the museum guide."""

    environment: str = Field(
        "development",
        description="Environment label controlling debug toggles and logging levels.",
    )
    data_directory: Path = Field(
        Path("data"),
        description="Directory holding the catalog database and visit history.",
    )
    catalog_filename: str = Field(
        "museum_guide.db",
        description="SQLite file inside the data directory used by the catalog store.",
    )
    history_filename: Optional[str] = Field(
        "history.json",
        description="JSON file inside the data directory for visit history. Unset to keep it in memory.",
    )
    interface_host: str = Field(
        "0.0.0.0",
        description="Network interface for the HTTP service to bind to.",
    )
    interface_port: int = Field(
        8000,
        description="Default port the HTTP service exposes.",
        ge=1,
        le=65535,
    )

    story_mode: Literal["quick", "standard", "deep", "kids"] = Field(
        "standard",
        description="Narration depth and register selected by the visitor.",
    )
    language: Literal["en", "ar"] = Field(
        "en",
        description="Narration language selected by the visitor.",
    )
    autoplay: bool = Field(True, description="Speak narration as soon as it is generated.")
    haptic_feedback: bool = Field(True, description="Signal commits with a vibration on devices that support it.")
    offline_mode: bool = Field(
        False,
        description="Never contact the narration backend; always compose narration locally.",
    )

    simulation_mode: bool = Field(
        True,
        description="Use the simulated detector instead of the real recognition cascade.",
    )
    detection_interval_ms: int = Field(
        500,
        description="Period of the detection timer in milliseconds.",
        ge=50,
    )
    stability_threshold: int = Field(
        3,
        description="Consecutive agreeing detections required before committing.",
        ge=1,
    )
    decay_ms: int = Field(
        2000,
        description="Silence in milliseconds after which a committed identification is dropped.",
        ge=0,
    )

    narration_api_key: Optional[str] = Field(
        None,
        description="API key for the narration backend. Leave unset to rely on local fallback narration.",
    )
    narration_api_url: str = Field(
        "https://generativelanguage.googleapis.com/v1beta/models/gemini-pro:generateContent",
        description="Endpoint of the generateContent-style narration backend.",
    )
    narration_timeout_seconds: float = Field(
        20.0,
        description="Timeout applied to each narration backend request.",
        gt=0,
    )

    class Config:
        env_prefix = "MUSEGUIDE_"
        env_file = ".env"
        case_sensitive = False

    @validator("data_directory", pre=True)
    def _expand_path(cls, value: Optional[str | Path]) -> Path:
        """Ensure configured paths expand user directories and exist."""

        path = Path(value).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    @property
    def catalog_path(self) -> Path:
        """Location of the SQLite catalog file."""

        return self.data_directory / self.catalog_filename

    @property
    def history_path(self) -> Optional[Path]:
        """Location of the persisted history file, if persistence is enabled."""

        if not self.history_filename:
            return None
        return self.data_directory / self.history_filename


@lru_cache()
def get_settings() -> GuideSettings:
    """Return cached settings, ensuring consistent configuration across modules."""

    return GuideSettings()
