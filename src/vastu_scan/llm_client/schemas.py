"""Content parts and request settings shared by the model backends."""

from __future__ import annotations

import base64
from dataclasses import dataclass
from typing import Union

HARM_CATEGORIES = [
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
]


@dataclass(frozen=True)
class TextPart:
    text: str


@dataclass(frozen=True)
class ImagePart:
    mime_type: str
    data: bytes

    def to_data_url(self) -> str:
        encoded = base64.b64encode(self.data).decode("utf-8")
        return f"data:{self.mime_type};base64,{encoded}"


ContentPart = Union[TextPart, ImagePart]


def safety_settings() -> list[dict]:
    # Every harm category is set to never block.
    return [{"category": category, "threshold": "BLOCK_NONE"} for category in HARM_CATEGORIES]
