"""
Weather answer generation.

This module turns what the user said plus one forecast entry into a short,
friendly answer in Spanish using the OpenAI chat completions endpoint.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict

import requests

from .config import Settings
from .exceptions import ServiceError

logger = logging.getLogger(__name__)

SERVICE = "summarization"

SYSTEM_PROMPT = "Eres un asistente meteorológico experto."

DEFAULT_PROMPT = (
    'Usuario dijo por voz: "{transcription}"\n\n'
    "Datos del clima (primer bloque del pronóstico):\n"
    "{forecast}\n\n"
    "Da una respuesta amigable, concisa y en español sobre el clima."
)


def build_prompt(transcription: str, forecast: Dict[str, Any]) -> str:
    """Embed the verbatim transcription and the serialised forecast entry."""
    return DEFAULT_PROMPT.format(
        transcription=transcription,
        forecast=json.dumps(forecast, indent=2, ensure_ascii=False),
    )


def summarise(transcription: str, forecast: Dict[str, Any], settings: Settings) -> str:
    """Generate the weather answer for a transcription and forecast entry.

    Args:
        transcription: Text recognised from the user's recording.
        forecast: The forecast entry returned by
            :func:`audioweather.weather_service.get_forecast`.
        settings: Application settings carrying the credential and model.

    Returns:
        The generated answer, exactly as returned by the model.

    Raises:
        ServiceError: On network errors, non-success responses, or a
            response without a message.
    """
    payload = {
        "model": settings.chat_model,
        "messages": [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": build_prompt(transcription, forecast)},
        ],
    }
    logger.info("Calling chat model %s for the weather answer", settings.chat_model)
    try:
        response = requests.post(
            settings.chat_url,
            headers={"Authorization": f"Bearer {settings.openai_api_key}"},
            json=payload,
        )
    except requests.RequestException as exc:
        raise ServiceError(SERVICE, str(exc), cause=exc) from exc

    if not response.ok:
        logger.error("Chat completion failed with status %s", response.status_code)
        raise ServiceError(SERVICE, f"HTTP {response.status_code}: {response.text}")

    try:
        return response.json()["choices"][0]["message"]["content"]
    except (ValueError, KeyError, IndexError, TypeError) as exc:
        raise ServiceError(SERVICE, "response did not contain an answer", cause=exc) from exc
