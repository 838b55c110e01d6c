"""Utilities for building a scan from local image files."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

from vastu_scan.io.scan_reader import CapturedFrame, ScanData, parse_scan_data
from vastu_scan.pipeline.zones import classify_zone

SUPPORTED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp"}

# File names start with the compass heading, e.g. "045_ne.jpg" or "292.5.png".
_HEADING_PREFIX = re.compile(r"^(\d+(?:\.\d+)?)")


def list_image_files(folder: Path) -> list[Path]:
    if not folder.exists():
        raise FileNotFoundError(f"Image folder not found: {folder}")
    if not folder.is_dir():
        raise NotADirectoryError(f"Expected directory for images: {folder}")

    images = [
        path
        for path in folder.iterdir()
        if path.is_file() and path.suffix.lower() in SUPPORTED_EXTENSIONS
    ]
    return sorted(images)


def mime_type_for(path: Path) -> str:
    mime = "image/jpeg"
    if path.suffix.lower() == ".png":
        mime = "image/png"
    elif path.suffix.lower() == ".webp":
        mime = "image/webp"
    return mime


def heading_from_filename(path: Path) -> float:
    match = _HEADING_PREFIX.match(path.stem)
    if match is None:
        raise ValueError(f"Image name must start with its heading in degrees: {path.name}")
    return float(match.group(1))


def load_frame(path: Path) -> CapturedFrame:
    heading = heading_from_filename(path)
    return CapturedFrame(
        image_data=path.read_bytes(),
        mime_type=mime_type_for(path),
        heading=heading,
        zone=classify_zone(heading),
    )


def load_scan_from_folder(folder: Path, *, details: dict[str, Any] | None = None) -> ScanData:
    """Frames come from ``folder``; room details (name, location, ...) from ``details``."""
    base = parse_scan_data({k: v for k, v in (details or {}).items() if k != "capturedImages"})
    frames = tuple(load_frame(path) for path in list_image_files(folder))
    return ScanData(
        room_label=base.room_label,
        location=base.location,
        floor=base.floor,
        concerns=base.concerns,
        surroundings=base.surroundings,
        frames=frames,
    )


def load_scan_file(path: Path) -> tuple[ScanData, bool]:
    """Read a request body saved as JSON; returns the scan and its deep-analysis flag."""
    if not path.exists():
        raise FileNotFoundError(f"Scan file not found: {path}")
    body = json.loads(path.read_text(encoding="utf-8"))
    if "scanData" in body:
        return parse_scan_data(body["scanData"]), bool(body.get("isDeepAnalysis"))
    return parse_scan_data(body), False
