"""
Process configuration for the audio-weather service.

Settings are read once at startup from the environment (optionally seeded by
a ``.env`` file) and handed to the request pipeline explicitly.  The
following variables are recognised:

* ``PORT`` – Port the HTTP server listens on (default ``4000``).
* ``OPENAI_API_KEY`` – Credential for the transcription and summarisation
  services.
* ``OPENWEATHER_KEY`` – Credential for the forecast service.
* ``UPLOAD_DIR`` – Staging directory for uploaded audio (default
  ``./uploads``).
* ``TRANSCRIPTION_URL``, ``TRANSCRIPTION_MODEL``, ``FORECAST_URL``,
  ``CHAT_URL``, ``CHAT_MODEL`` – Override the upstream endpoints and models.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import List, Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel

MAX_UPLOAD_BYTES = 25 * 1024 * 1024

TRANSCRIPTION_URL = "https://api.openai.com/v1/audio/transcriptions"
FORECAST_URL = "https://api.openweathermap.org/data/2.5/forecast"
CHAT_URL = "https://api.openai.com/v1/chat/completions"


class Settings(BaseModel, frozen=True):
    """Root application configuration."""

    port: int = 4000
    openai_api_key: str = ""
    openweather_key: str = ""
    upload_dir: Path = Path("uploads")
    max_upload_bytes: int = MAX_UPLOAD_BYTES
    language: str = "es"
    transcription_url: str = TRANSCRIPTION_URL
    transcription_model: str = "whisper-1"
    forecast_url: str = FORECAST_URL
    chat_url: str = CHAT_URL
    chat_model: str = "gpt-3.5-turbo"

    def missing_credentials(self) -> List[str]:
        """Return the names of credentials that are not configured."""
        missing = []
        if not self.openai_api_key:
            missing.append("OPENAI_API_KEY")
        if not self.openweather_key:
            missing.append("OPENWEATHER_KEY")
        return missing


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Load settings from ``environ`` (defaults to ``os.environ`` after ``.env``)."""
    if environ is None:
        load_dotenv()
        environ = os.environ
    return Settings(
        port=environ.get("PORT") or 4000,
        openai_api_key=environ.get("OPENAI_API_KEY", ""),
        openweather_key=environ.get("OPENWEATHER_KEY", ""),
        upload_dir=Path(environ.get("UPLOAD_DIR") or "uploads").resolve(),
        transcription_url=environ.get("TRANSCRIPTION_URL", TRANSCRIPTION_URL),
        transcription_model=environ.get("TRANSCRIPTION_MODEL", "whisper-1"),
        forecast_url=environ.get("FORECAST_URL", FORECAST_URL),
        chat_url=environ.get("CHAT_URL", CHAT_URL),
        chat_model=environ.get("CHAT_MODEL", "gpt-3.5-turbo"),
    )
