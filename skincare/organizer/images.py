"""Product photos stored inline as ``data:`` URLs."""

from __future__ import annotations

import base64
import binascii
import mimetypes
from pathlib import Path


def encode_image_file(path: str | Path) -> str:
    """Read an image file and return it as a base64 ``data:`` URL.

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Image not found: {path}")
    data = path.read_bytes()
    media_type = mimetypes.guess_type(str(path))[0] or "image/jpeg"
    encoded = base64.standard_b64encode(data).decode()
    return f"data:{media_type};base64,{encoded}"


def decode_data_url(data_url: str) -> tuple[str, bytes] | None:
    """Split a base64 ``data:`` URL into (media type, payload).

    Returns None when the value is empty or not a base64 data URL.
    """
    if not data_url or not data_url.startswith("data:"):
        return None
    header, sep, payload = data_url[5:].partition(",")
    if not sep or not header.endswith(";base64"):
        return None
    media_type = header[: -len(";base64")] or "application/octet-stream"
    try:
        return media_type, base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        return None
