"""
Staging utilities for uploaded audio.

Each request writes its recording into the shared staging directory under a
name nobody else can pick, hands the path to the transcription client, and
removes the file again on the way out.  The directory itself is created once
when the application starts.
"""

import logging
import os
import time
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional, Union

from werkzeug.datastructures import FileStorage

logger = logging.getLogger(__name__)

AUDIO_PREFIX = "audio-"
AUDIO_EXTENSION = ".m4a"


@dataclass(frozen=True)
class StagedAudio:
    """An uploaded recording written to the staging directory."""

    filename: str
    size: int
    path: Path


def ensure_staging_dir(path: Union[str, Path]) -> Path:
    """Create the staging directory if it does not exist yet and return it."""
    staging_dir = Path(path)
    staging_dir.mkdir(parents=True, exist_ok=True)
    logger.info("Staging directory ready: %s", staging_dir)
    return staging_dir


def unique_audio_name() -> str:
    """Return a file name that is unique per request.

    The nanosecond timestamp keeps names sortable; the random suffix covers
    two requests landing on the same clock tick.
    """
    return f"{AUDIO_PREFIX}{time.time_ns()}-{uuid.uuid4().hex[:8]}{AUDIO_EXTENSION}"


def cleanup_temp_file(path: Optional[Union[str, Path]]) -> None:
    """Remove a staged file if it exists.

    Args:
        path: Path to the staged file.  Nothing happens if ``path`` is
            ``None`` or the file is already gone.  Removal errors are logged
            and swallowed so they never reach the client.
    """
    if path and os.path.exists(path):
        try:
            os.remove(path)
            logger.info("Removed staged audio %s", path)
        except OSError:
            logger.exception("Could not remove staged audio %s", path)


@contextmanager
def staged_upload(upload: FileStorage, staging_dir: Union[str, Path]) -> Iterator[StagedAudio]:
    """Write ``upload`` into ``staging_dir`` and delete it when the block exits."""
    path = Path(staging_dir) / unique_audio_name()
    try:
        upload.save(str(path))
        staged = StagedAudio(filename=path.name, size=path.stat().st_size, path=path)
        logger.info("Staged audio %s (%d bytes)", staged.path, staged.size)
        yield staged
    finally:
        # A failed save can leave a partial file behind.
        cleanup_temp_file(path)
