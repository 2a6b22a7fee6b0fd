"""
Orchestration layer for the audio-weather pipeline.

This module defines the request pipeline called from the HTTP entrypoint in
:mod:`audioweather.main`.  One call runs these steps strictly in order:

* Validate that the recording and both coordinates are present.
* Stage the recording in the upload directory.
* Transcribe it, fetch the forecast, and generate the answer.
* Remove the staged recording, whatever happened before.

A failure in any step ends the request; later steps are never attempted and
no partial result is returned.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional, Tuple

from werkzeug.datastructures import FileStorage

from . import audio_processor, stt_service, summarizer, weather_service
from .config import Settings
from .exceptions import (
    MISSING_AUDIO,
    MISSING_COORDINATES,
    PROCESSING_FAILED,
    InputValidationError,
)
from .models import ErrorResponse, Location, WeatherAnswer

logger = logging.getLogger(__name__)


def _log_event(event: str, **fields: Any) -> None:
    logger.info(json.dumps({"event": event, **fields}, ensure_ascii=False))


def validate_request(
    upload: Optional[FileStorage],
    latitude: Optional[str],
    longitude: Optional[str],
) -> None:
    """Raise :class:`InputValidationError` if a required input is missing."""
    if upload is None or not upload.filename:
        raise InputValidationError(MISSING_AUDIO)
    if not latitude or not longitude:
        raise InputValidationError(MISSING_COORDINATES)


def run_pipeline(
    upload: FileStorage,
    latitude: str,
    longitude: str,
    settings: Settings,
) -> WeatherAnswer:
    """Stage the upload and run transcription, forecast and summarisation."""
    with audio_processor.staged_upload(upload, settings.upload_dir) as staged:
        _log_event("audio_staged", file=staged.filename, size=staged.size)

        text = stt_service.transcribe(staged.path, settings)
        _log_event("transcribed", file=staged.filename, chars=len(text))

        forecast = weather_service.get_forecast(latitude, longitude, settings)
        _log_event("forecast_selected", dt_txt=forecast.get("dt_txt"))

        answer = summarizer.summarise(text, forecast, settings)
        _log_event("answer_generated", file=staged.filename)

    return WeatherAnswer(
        transcription=text,
        ai_response=answer,
        location=Location(latitude=latitude, longitude=longitude),
    )


def process_audio_weather(
    upload: Optional[FileStorage],
    latitude: Optional[str],
    longitude: Optional[str],
    settings: Settings,
) -> Tuple[Dict[str, Any], int]:
    """Handle one audio-weather request.

    Returns:
        The JSON body and HTTP status: 200 with the answer, 400 when an input
        is missing, 500 when any upstream call fails.
    """
    _log_event("request", has_audio=upload is not None, latitude=latitude, longitude=longitude)
    try:
        validate_request(upload, latitude, longitude)
    except InputValidationError as exc:
        _log_event("invalid_request", reason=str(exc))
        return ErrorResponse(error=str(exc)).body(), 400

    try:
        answer = run_pipeline(upload, latitude, longitude, settings)
    except Exception as exc:
        logger.exception("Error in /api/audio-weather")
        _log_event("error", details=str(exc))
        return ErrorResponse(error=PROCESSING_FAILED, details=str(exc)).body(), 500

    return answer.model_dump(), 200
