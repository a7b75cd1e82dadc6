"""
Decoding of embedded image payloads.

Photos and signatures arrive as base64 data URLs produced by the browser
(``FileReader.readAsDataURL`` and ``canvas.toDataURL``). This module turns
them into fully decoded images the PDF canvas can draw, and reports every
problem as an ``ImagePayloadError`` so callers can degrade per item.
"""

from __future__ import annotations

import base64
import binascii
import re
from io import BytesIO

from PIL import Image, UnidentifiedImageError
from reportlab.lib.utils import ImageReader

DATA_URL_PATTERN = re.compile(r"^data:(?P<mime>[^;,]*)(?P<params>(?:;[^;,]*)*?);base64,(?P<data>.*)$", re.DOTALL)


class ImagePayloadError(ValueError):
    """Raised when an embedded image payload cannot be turned into an image."""


def decode_data_url(payload: str) -> bytes:
    """
    Decode a base64 data URL (or bare base64 text) into raw bytes.

    Args:
        payload: ``data:image/png;base64,...`` or plain base64

    Returns:
        The decoded bytes

    Raises:
        ImagePayloadError: If the payload is empty, is a non-base64 data URL,
            or contains invalid base64
    """
    if not payload or not payload.strip():
        raise ImagePayloadError("empty image payload")

    text = payload.strip()
    if text.startswith("data:"):
        match = DATA_URL_PATTERN.match(text)
        if not match:
            raise ImagePayloadError("data URL is not base64 encoded")
        text = match.group("data")

    text = "".join(text.split())
    if not text:
        raise ImagePayloadError("empty image payload")

    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ImagePayloadError(f"invalid base64 data: {exc}") from exc


def load_image(payload: str, max_bytes: int = 5 * 1024 * 1024) -> ImageReader:
    """
    Decode and verify an image payload for placement on a PDF canvas.

    The image is fully decoded with Pillow so truncated or corrupt files are
    rejected here rather than halfway through drawing.

    Raises:
        ImagePayloadError: If decoding fails or the image exceeds ``max_bytes``
    """
    raw = decode_data_url(payload)
    if len(raw) > max_bytes:
        raise ImagePayloadError(f"image is {len(raw)} bytes, limit is {max_bytes}")

    try:
        image = Image.open(BytesIO(raw))
        image.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError, ValueError) as exc:
        raise ImagePayloadError(f"unreadable image data: {exc}") from exc

    return ImageReader(image)
