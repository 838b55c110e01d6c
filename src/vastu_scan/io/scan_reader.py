"""Parsing of scan and chat payloads submitted by the client app."""

from __future__ import annotations

import base64
import binascii
import math
from dataclasses import dataclass
from typing import Any, Iterable

from vastu_scan.pipeline.zones import classify_zone

DEFAULT_MIME_TYPE = "image/jpeg"
CHAT_ROLES = ("user", "model")


class ScanPayloadError(ValueError):
    pass


@dataclass(frozen=True)
class CapturedFrame:
    image_data: bytes
    mime_type: str
    heading: float
    zone: str


@dataclass(frozen=True)
class ScanData:
    room_label: str | None
    location: Any
    floor: str | None
    concerns: str | None
    surroundings: str | None
    frames: tuple[CapturedFrame, ...]


@dataclass(frozen=True)
class ChatMessage:
    role: str
    text: str


def decode_image_data(raw: str, default_mime: str = DEFAULT_MIME_TYPE) -> tuple[bytes, str]:
    """Decode raw base64 or a ``data:<mime>;base64,`` URL into bytes and a MIME type."""
    mime = default_mime
    encoded = raw
    if raw.startswith("data:"):
        header, _, encoded = raw.partition(",")
        mime = header[len("data:"):].split(";")[0] or default_mime
    try:
        return base64.b64decode(encoded, validate=True), mime
    except (binascii.Error, ValueError) as exc:
        raise ScanPayloadError(f"Invalid base64 image data: {exc}") from exc


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _parse_location(value: Any) -> Any:
    # Numbers stay numeric so cusp detection can run; anything else is a free-text tag.
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    return _optional_text(value)


def parse_frame(item: dict, index: int) -> CapturedFrame:
    if not isinstance(item, dict):
        raise ScanPayloadError(f"Frame {index} must be an object")

    raw = item.get("imageData") or item.get("base64") or item.get("image")
    if not isinstance(raw, str) or not raw:
        raise ScanPayloadError(f"Frame {index} is missing image data")
    data, mime = decode_image_data(raw, item.get("mimeType") or DEFAULT_MIME_TYPE)

    try:
        heading = float(item.get("heading", 0.0))
    except (TypeError, ValueError) as exc:
        raise ScanPayloadError(f"Frame {index} has a non-numeric heading") from exc
    if not math.isfinite(heading):
        raise ScanPayloadError(f"Frame {index} has a non-finite heading")

    zone = _optional_text(item.get("zone")) or classify_zone(heading)
    return CapturedFrame(image_data=data, mime_type=mime, heading=heading, zone=zone)


def parse_scan_data(payload: dict | None) -> ScanData:
    """Build a ScanData from the request body's ``scanData`` object.

    Text fields are optional; absent ones are rendered as "N/A" by the prompt
    builders. Only frame image data is validated strictly.
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ScanPayloadError("scanData must be an object")

    raw_frames = payload.get("capturedImages") or payload.get("frames") or []
    if not isinstance(raw_frames, list):
        raise ScanPayloadError("capturedImages must be a list")

    return ScanData(
        room_label=_optional_text(payload.get("roomName") or payload.get("roomLabel")),
        location=_parse_location(payload.get("roomLocation", payload.get("location"))),
        floor=_optional_text(payload.get("floor")),
        concerns=_optional_text(payload.get("concerns")),
        surroundings=_optional_text(payload.get("surroundings")),
        frames=tuple(parse_frame(item, i) for i, item in enumerate(raw_frames, start=1)),
    )


def _message_text(item: dict) -> str:
    if "text" in item:
        return str(item.get("text") or "")
    parts = item.get("parts") or []
    return "".join(
        str(part.get("text", "")) for part in parts if isinstance(part, dict)
    )


def parse_chat_history(items: Iterable[Any] | None) -> list[ChatMessage]:
    """Accept ``{"role", "text"}`` or Gemini-style ``{"role", "parts": [...]}`` entries."""
    if items is not None and not isinstance(items, list):
        raise ScanPayloadError("chatHistory must be a list")
    history: list[ChatMessage] = []
    for index, item in enumerate(items or [], start=1):
        if not isinstance(item, dict):
            raise ScanPayloadError(f"Chat message {index} must be an object")
        role = item.get("role")
        if role == "assistant":
            role = "model"
        if role not in CHAT_ROLES:
            raise ScanPayloadError(f"Chat message {index} has unsupported role: {role!r}")
        history.append(ChatMessage(role=role, text=_message_text(item)))
    return history
