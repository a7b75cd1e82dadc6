"""
Pytest configuration and fixtures for Inspection Report Backend tests.
"""

import base64
from io import BytesIO

import pytest
from fastapi.testclient import TestClient
from PIL import Image
from PyPDF2 import PdfReader

from inspection_report_backend.composer import ReportComposer
from inspection_report_backend.configuration import make_report_config
from inspection_report_backend.main import app


def _png_data_url(size=(120, 90), color=(200, 30, 30), mode="RGB"):
    buffer = BytesIO()
    Image.new(mode, size, color).save(buffer, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buffer.getvalue()).decode("ascii")


@pytest.fixture
def client():
    """Create a test client for the FastAPI app."""
    return TestClient(app)


@pytest.fixture
def composer():
    """A composer using the packaged default configuration."""
    return ReportComposer(make_report_config())


@pytest.fixture
def png_data_url():
    """A small, well-formed PNG photo encoded as a data URL."""
    return _png_data_url()


@pytest.fixture
def signature_data_url():
    """A transparent PNG, like the browser signature canvas produces."""
    return _png_data_url(size=(300, 100), color=(0, 0, 0, 0), mode="RGBA")


@pytest.fixture
def sample_payload(png_data_url, signature_data_url):
    """A complete submission as the intake form sends it."""
    return {
        "date": "2026-10-19T08:30:00.000Z",
        "customer": {
            "location": "Wrap Station Medan",
            "firstName": "Rina",
            "lastName": "Siregar",
            "phone": "081234567890",
            "carBrand": "Toyota",
            "carModel": "Avanza",
            "color": "Silver",
            "licensePlate": "BK-1234-XY",
        },
        "inspection": {
            "Paint": {"status": "G", "notes": "", "file": None},
            "Windshield": {"status": "F", "notes": "Small chip on the passenger side.", "file": None},
            "Windows": {"status": "G", "notes": "Windows is clean.", "file": None},
            "Tires": {
                "status": "P",
                "notes": "Front left tread is worn.",
                "file": {"name": "tire.png", "dataUrl": png_data_url},
            },
        },
        "agreed": True,
        "signature": signature_data_url,
    }


@pytest.fixture
def read_pdf():
    """Parse PDF bytes into a PdfReader."""

    def _read(payload: bytes) -> PdfReader:
        return PdfReader(BytesIO(payload))

    return _read


@pytest.fixture
def pdf_text(read_pdf):
    """Extract the text of every page of a PDF, joined by newlines."""

    def _text(payload: bytes) -> str:
        return "\n".join(page.extract_text() or "" for page in read_pdf(payload).pages)

    return _text
