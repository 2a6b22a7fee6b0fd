"""
Forecast lookup against the OpenWeather five-day forecast API.

Only the first entry of the forecast list is used: it is the one closest to
the time of the request.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

import requests

from .config import Settings
from .exceptions import ForecastUnavailableError, ServiceError

logger = logging.getLogger(__name__)

SERVICE = "weather"


def _redact(message: str, secret: str) -> str:
    # The key travels in the query string and shows up in request errors.
    return message.replace(secret, "***") if secret else message


def get_forecast(latitude: str, longitude: str, settings: Settings) -> Dict[str, Any]:
    """Return the nearest-term forecast entry for the given coordinates.

    Coordinates are forwarded as received; the provider validates them.

    Raises:
        ServiceError: On network errors or non-success responses.
        ForecastUnavailableError: If the forecast list is missing or empty.
    """
    params = {
        "lat": latitude,
        "lon": longitude,
        "appid": settings.openweather_key,
        "units": "metric",
        "lang": settings.language,
    }
    logger.info("Requesting forecast for lat=%s lon=%s", latitude, longitude)
    try:
        response = requests.get(settings.forecast_url, params=params)
    except requests.RequestException as exc:
        # The raw error carries the request URL, key included; do not chain it.
        raise ServiceError(SERVICE, _redact(str(exc), settings.openweather_key)) from None

    if not response.ok:
        logger.error("Forecast request failed with status %s", response.status_code)
        raise ServiceError(
            SERVICE,
            f"HTTP {response.status_code}: {_redact(response.text, settings.openweather_key)}",
        )

    try:
        entries = response.json().get("list") or []
    except (ValueError, AttributeError) as exc:
        raise ServiceError(SERVICE, "forecast response was not a JSON object", cause=exc) from exc
    if not entries:
        raise ForecastUnavailableError()
    return entries[0]
