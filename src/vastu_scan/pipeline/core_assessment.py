"""Pipeline stage 1: visual assessment of the captured frames."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from vastu_scan.io.scan_reader import ScanData
from vastu_scan.llm_client.prompts import (
    NO_VISUAL_DATA_TEXT,
    PromptContext,
    build_frame_caption,
    build_visual_assessment_prompt,
    tag_marker,
)
from vastu_scan.llm_client.schemas import ContentPart, ImagePart, TextPart
from vastu_scan.pipeline.zones import CANONICAL_ZONE_ORDER

if TYPE_CHECKING:
    from vastu_scan.llm_client.responses import LLMClient

logger = logging.getLogger(__name__)

FALLBACK_ASSESSMENT = (
    "**Core Vastu Assessment**\n\n1. Assessment failed to generate. Please rescan."
)

_RESIDUAL_NUMBER = re.compile(r"^[ \t]*(?:\d+\.[ \t]*)+", re.MULTILINE)


def build_frame_parts(scan: ScanData) -> list[ContentPart]:
    if not scan.frames:
        return [TextPart(NO_VISUAL_DATA_TEXT)]

    parts: list[ContentPart] = []
    for index, frame in enumerate(scan.frames, start=1):
        parts.append(TextPart(build_frame_caption(index, frame)))
        parts.append(ImagePart(mime_type=frame.mime_type, data=frame.image_data))
    return parts


def tag_assessment(text: str) -> str:
    """Replace numbered findings ``1.`` .. ``8.`` with positional markers.

    Items are matched in increasing order, each search starting after the
    previous hit; a missing item simply leaves its marker out. Any leading
    ``<digits>.`` left on a line afterwards is removed, so running this on
    already tagged text changes nothing.
    """
    cursor = 0
    for position in range(1, len(CANONICAL_ZONE_ORDER) + 1):
        pattern = re.compile(rf"^[ \t]*{position}\.[ \t]*", re.MULTILINE)
        match = pattern.search(text, cursor)
        if match is None:
            logger.debug("Finding %d missing from visual assessment", position)
            continue
        replacement = f"{tag_marker(position)} "
        text = text[: match.start()] + replacement + text[match.end():]
        cursor = match.start() + len(replacement)

    return _RESIDUAL_NUMBER.sub("", text)


def run_core_assessment(
    client: LLMClient,
    context: PromptContext,
    parts: list[ContentPart],
    *,
    timeout: float,
) -> str:
    prompt = build_visual_assessment_prompt(context)
    logger.info("Running core assessment with %d content parts", len(parts))
    output = client.generate([TextPart(prompt), *parts], timeout=timeout)
    if not output:
        logger.warning("Core assessment returned no text; using fallback")
        return FALLBACK_ASSESSMENT
    return output
