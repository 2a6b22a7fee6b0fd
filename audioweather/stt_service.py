"""
Speech-to-text service wrapper.

This module encapsulates interaction with the OpenAI transcription endpoint.
The ``transcribe`` function uploads a staged audio file as multipart content
and returns the recognised text.

Usage::

    from audioweather.stt_service import transcribe

    text = transcribe(staged.path, settings)
"""

import logging
import os
from pathlib import Path
from typing import Union

import requests

from .config import Settings
from .exceptions import ServiceError

logger = logging.getLogger(__name__)

SERVICE = "transcription"


def transcribe(audio_path: Union[str, Path], settings: Settings) -> str:
    """Transcribe a staged audio file.

    Args:
        audio_path: Path of the file in the staging directory.
        settings: Application settings carrying the credential, model name
            and target language.

    Returns:
        The recognised text.

    Raises:
        ServiceError: On network errors, non-success responses, or a
            response without a ``text`` field.
    """
    logger.info("Sending %s to %s", audio_path, settings.transcription_url)
    try:
        with open(audio_path, "rb") as audio_file:
            response = requests.post(
                settings.transcription_url,
                headers={"Authorization": f"Bearer {settings.openai_api_key}"},
                files={"file": (os.path.basename(str(audio_path)), audio_file)},
                data={
                    "model": settings.transcription_model,
                    "language": settings.language,
                },
            )
    except requests.RequestException as exc:
        raise ServiceError(SERVICE, str(exc), cause=exc) from exc

    if not response.ok:
        logger.error("Transcription failed with status %s", response.status_code)
        raise ServiceError(SERVICE, f"HTTP {response.status_code}: {response.text}")

    try:
        return response.json()["text"]
    except (ValueError, KeyError, TypeError) as exc:
        raise ServiceError(SERVICE, "response did not contain a transcription", cause=exc) from exc
