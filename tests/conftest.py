"""Root conftest - loads .env and provides sample documents."""

import io
import logging
from datetime import datetime

import pytest
from dotenv import load_dotenv
from PIL import Image

load_dotenv()

logging.getLogger("tabulon").setLevel(logging.DEBUG)

SAMPLE_CSV = "Name,Age\nAlice,30\nBob,25"

SAMPLE_JSON = '{"items":[{"a":1},{"a":2,"b":"x"}]}'

SAMPLE_XML = (
    '<?xml version="1.0"?>'
    "<catalog>"
    "<title>Shop</title>"
    '<product id="1"><name>Widget</name><price>9.99</price></product>'
    '<product id="2"><name>Gadget</name><price>19.99</price><stock>5</stock></product>'
    "</catalog>"
)

FIXED_TIME = datetime(2026, 1, 2, 3, 4, 5)


@pytest.fixture
def sample_csv() -> str:
    return SAMPLE_CSV


@pytest.fixture
def sample_json() -> str:
    return SAMPLE_JSON


@pytest.fixture
def sample_xml() -> str:
    return SAMPLE_XML


@pytest.fixture
def fixed_time() -> datetime:
    return FIXED_TIME


@pytest.fixture
def png_bytes() -> bytes:
    """A small valid PNG image."""
    img = Image.new("RGB", (60, 30), color=(13, 148, 136))
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()
