"""Response models for the audio-weather API."""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field


def utc_timestamp() -> str:
    """Current time as ISO-8601 UTC with millisecond precision."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class Location(BaseModel):
    """Coordinates echoed back exactly as the client sent them."""

    latitude: str
    longitude: str


class WeatherAnswer(BaseModel):
    """Response returned after a successful pipeline run."""

    transcription: str
    ai_response: str
    location: Location
    timestamp: str = Field(default_factory=utc_timestamp)


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None

    def body(self) -> dict:
        return self.model_dump(exclude_none=True)
