"""
Tests for image payload decoding.
"""

import base64

import pytest
from reportlab.lib.utils import ImageReader

from inspection_report_backend.images import ImagePayloadError, decode_data_url, load_image


class TestDecodeDataUrl:
    """Tests for decode_data_url."""

    def test_decodes_data_url(self):
        """The base64 part of a data URL is decoded."""
        assert decode_data_url("data:text/plain;base64,aGVsbG8=") == b"hello"

    def test_decodes_bare_base64(self):
        """Payloads without a data: prefix are treated as base64."""
        assert decode_data_url(base64.b64encode(b"raw bytes").decode()) == b"raw bytes"

    def test_ignores_line_breaks(self):
        """Wrapped base64 text is accepted."""
        assert decode_data_url("aGVs\nbG8=") == b"hello"

    @pytest.mark.parametrize("payload", ["", "   ", "data:image/png;base64,"])
    def test_empty_payload_rejected(self, payload):
        """Empty payloads are reported as errors."""
        with pytest.raises(ImagePayloadError, match="empty"):
            decode_data_url(payload)

    def test_non_base64_data_url_rejected(self):
        """Percent-encoded data URLs are not supported."""
        with pytest.raises(ImagePayloadError, match="not base64"):
            decode_data_url("data:image/svg+xml,%3Csvg%3E")

    def test_invalid_characters_rejected(self):
        """Characters outside the base64 alphabet are rejected."""
        with pytest.raises(ImagePayloadError, match="invalid base64"):
            decode_data_url("data:image/png;base64,@@@@")


class TestLoadImage:
    """Tests for load_image."""

    def test_loads_png(self, png_data_url):
        """A well-formed PNG becomes an ImageReader with its size."""
        image = load_image(png_data_url)
        assert isinstance(image, ImageReader)
        assert image.getSize() == (120, 90)

    def test_rejects_non_image(self):
        """Decodable bytes that are not an image are rejected."""
        with pytest.raises(ImagePayloadError, match="unreadable image"):
            load_image("data:image/png;base64," + base64.b64encode(b"not an image").decode())

    def test_rejects_truncated_image(self, png_data_url):
        """A PNG cut short fails during decoding."""
        raw = base64.b64decode(png_data_url.split(",", 1)[1])
        truncated = base64.b64encode(raw[: len(raw) // 2]).decode()
        with pytest.raises(ImagePayloadError):
            load_image(truncated)

    def test_enforces_size_limit(self, png_data_url):
        """Images over the byte ceiling are rejected before decoding."""
        with pytest.raises(ImagePayloadError, match="limit"):
            load_image(png_data_url, max_bytes=16)
