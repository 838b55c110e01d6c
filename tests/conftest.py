# tests/conftest.py
from __future__ import annotations

import base64

import pytest

from tests.utils import FakeClient
from vastu_scan.config import AppConfig


@pytest.fixture
def fake_client_factory():
    def _factory(*responses):
        return FakeClient(responses)

    return _factory


@pytest.fixture
def config():
    return AppConfig(google_api_key="test-key")


@pytest.fixture
def image_b64():
    return base64.b64encode(b"\xff\xd8\xff fake jpeg").decode("ascii")


@pytest.fixture
def scan_payload(image_b64):
    """Factory for a generateReport ``scanData`` body (overridable)."""

    def _factory(**overrides):
        payload = {
            "roomName": "Master Bedroom",
            "roomLocation": 35.0,
            "floor": "First",
            "concerns": "Poor sleep",
            "surroundings": "Park to the east",
            "capturedImages": [
                {"imageData": image_b64, "heading": 2.0, "zone": "N"},
                {"imageData": f"data:image/png;base64,{image_b64}", "heading": 91.0, "zone": "E"},
            ],
        }
        payload.update(overrides)
        return payload

    return _factory
