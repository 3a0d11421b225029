"""
Local disk storage for uploaded images (avatars, news images, evidence).
"""

import logging
import os
import secrets
import time
from pathlib import Path
from typing import BinaryIO, Optional

from newsverify.config import get_settings
from newsverify.errors import ValidationFailed


logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


def upload_root() -> Path:
    path = Path(get_settings().upload_dir)
    path.mkdir(parents=True, exist_ok=True)
    return path


def stored_name(original_filename: Optional[str]) -> str:
    """``<epoch-ms>-<random><ext>``; only the extension of the client name is kept."""
    ext = os.path.splitext(original_filename or "")[1].lower()
    if not ext.replace(".", "").isalnum():
        ext = ""
    return f"{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{ext}"


def public_url(name: str) -> str:
    base = get_settings().public_base_url.rstrip("/")
    return f"{base}/uploads/{name}"


def store_upload(source: BinaryIO, original_filename: Optional[str]) -> str:
    """
    Copy an upload to disk and return its public URL.

    Raises:
        ValidationFailed: empty file, or larger than ``max_upload_bytes``
    """
    settings = get_settings()
    name = stored_name(original_filename)
    target = upload_root() / name

    written = 0
    with open(target, "wb") as out:
        while True:
            chunk = source.read(CHUNK_SIZE)
            if not chunk:
                break
            written += len(chunk)
            if written > settings.max_upload_bytes:
                break
            out.write(chunk)

    if written == 0 or written > settings.max_upload_bytes:
        target.unlink(missing_ok=True)
        raise ValidationFailed("No file uploaded" if written == 0 else "File too large")

    logger.info(f"Stored upload {name} ({written} bytes)")
    return public_url(name)
