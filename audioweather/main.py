"""
HTTP entrypoint for the audio-weather service.

Routes:

* ``GET /`` – liveness probe.
* ``POST /api/audio-weather`` – multipart form with ``audio``, ``latitude``
  and ``longitude``; answers with the transcription and a weather summary.

Run locally with ``audioweather`` (console script) or
``python -m audioweather.main``.  Under a WSGI server use the factory:
``gunicorn 'audioweather.main:create_app()'``.
"""

import json
import logging
from typing import Optional

from flask import Flask, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import RequestEntityTooLarge

from . import audio_processor, tasks
from .config import Settings, load_settings
from .models import ErrorResponse

logger = logging.getLogger(__name__)

HEALTH_MESSAGE = "Backend funcionando correctamente 🚀"
AUDIO_WEATHER_ROUTE = "/api/audio-weather"


def create_app(settings: Optional[Settings] = None) -> Flask:
    """Build the Flask application around ``settings``."""
    if settings is None:
        settings = load_settings()
    for name in settings.missing_credentials():
        logger.warning("%s is not set; upstream calls will be rejected", name)

    audio_processor.ensure_staging_dir(settings.upload_dir)

    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = settings.max_upload_bytes
    app.json.ensure_ascii = False
    CORS(app, resources={r"/*": {"origins": "*"}}, send_wildcard=True)

    @app.errorhandler(RequestEntityTooLarge)
    def too_large(exc):
        logger.info(json.dumps({"event": "upload_too_large", "limit": settings.max_upload_bytes}))
        body = ErrorResponse(error="Archivo de audio demasiado grande", details=str(exc))
        return jsonify(body.body()), 413

    @app.route("/", methods=["GET"])
    def health():
        return jsonify({"message": HEALTH_MESSAGE})

    @app.route(AUDIO_WEATHER_ROUTE, methods=["POST"])
    def audio_weather():
        body, status = tasks.process_audio_weather(
            request.files.get("audio"),
            request.form.get("latitude"),
            request.form.get("longitude"),
            settings,
        )
        return jsonify(body), status

    return app


def run() -> None:
    """Configure logging, build the app and serve it."""
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    settings = load_settings()
    app = create_app(settings)
    logger.info("Servidor listo en puerto %s", settings.port)
    logger.info("Endpoint de audio: %s", AUDIO_WEATHER_ROUTE)
    app.run(host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    run()
