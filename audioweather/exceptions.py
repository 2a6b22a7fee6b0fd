"""Custom exceptions for the audio-weather pipeline."""

from __future__ import annotations

from typing import Optional

MISSING_AUDIO = "No llegó archivo de audio al servidor"
MISSING_COORDINATES = "Faltan coordenadas"
PROCESSING_FAILED = "Error procesando el audio"


class InputValidationError(Exception):
    """Raised when the inbound request lacks the audio file or coordinates."""


class ServiceError(Exception):
    """Raised when an upstream service call fails or returns an unusable body."""

    def __init__(self, service: str, detail: str, cause: Optional[Exception] = None):
        self.service = service
        self.detail = detail
        self.cause = cause
        super().__init__(f"{service} service error: {detail}")


class ForecastUnavailableError(ServiceError):
    """Raised when the forecast service answers without any forecast entry."""

    def __init__(self, detail: str = "forecast response contained no entries"):
        super().__init__("weather", detail)
