"""Upload Storage — scratch directory for multipart uploads.

Invariants:
    - ensure_upload_dir() is idempotent (concurrent first use is harmless)
    - Saved uploads keep their original extension under a random name
"""

import logging
import os
import uuid
from pathlib import Path

from fastapi import UploadFile

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 64 * 1024


def ensure_upload_dir(path: str) -> Path:
    directory = Path(path)
    if not directory.is_dir():
        logger.info(f"creating tmp upload dir: {directory}")
        os.makedirs(directory, exist_ok=True)
    return directory


async def save_upload(upload: UploadFile, upload_dir: str) -> Path:
    """Copy an UploadFile into the scratch directory, returning the stored path."""
    directory = ensure_upload_dir(upload_dir)
    suffix = Path(upload.filename or "").suffix
    target = directory / f"{uuid.uuid4().hex}{suffix}"
    with open(target, "wb") as out:
        while chunk := await upload.read(_CHUNK_SIZE):
            out.write(chunk)
    return target
