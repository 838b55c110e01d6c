"""Prompt builders for the two report stages and the follow-up chat.

Every builder is a pure function of its arguments. The numbered-list order
requested from the visual assessment comes from ``CANONICAL_ZONE_ORDER``, the
same constant the tagging step walks, so the two can never disagree.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from vastu_scan.io.scan_reader import CapturedFrame, ScanData
from vastu_scan.pipeline.cusp import CuspWarning
from vastu_scan.pipeline.zones import CANONICAL_ZONE_ORDER

NOT_AVAILABLE = "N/A"

NO_VISUAL_DATA_TEXT = (
    "No visual data was captured for this scan. Base every numbered item on the "
    "room details alone and state that no image was available for that direction."
)

ASSESSMENT_PERSONA = (
    "You are an expert Vastu Shastra consultant and building inspector reviewing a "
    "directional room scan captured with a phone compass."
)

CHAT_PERSONA = (
    "You are a helpful and friendly Vastu Shastra AI assistant. You answer follow-up "
    "questions about a room report the user has already received."
)


@dataclass(frozen=True)
class PromptContext:
    room_label: str
    location: str
    floor: str
    concerns: str
    surroundings: str
    frame_count: int
    deep_analysis: bool = False
    cusp: CuspWarning | None = None

    @classmethod
    def from_scan(
        cls,
        scan: ScanData,
        *,
        deep_analysis: bool = False,
        cusp: CuspWarning | None = None,
    ) -> "PromptContext":
        def text(value: object) -> str:
            if value is None or value == "":
                return NOT_AVAILABLE
            return str(value)

        return cls(
            room_label=text(scan.room_label),
            location=text(scan.location),
            floor=text(scan.floor),
            concerns=text(scan.concerns),
            surroundings=text(scan.surroundings),
            frame_count=len(scan.frames),
            deep_analysis=deep_analysis,
            cusp=cusp,
        )


def tag_marker(position: int) -> str:
    """Placeholder that replaces the ``position``-th numbered finding (1-based)."""
    return f"[IMAGE_{position}_ANALYSIS]"


def build_frame_caption(index: int, frame: CapturedFrame) -> str:
    return f"Image {index}: captured facing {frame.heading:.1f}° (zone {frame.zone})."


def _zone_order_lines() -> str:
    return "\n".join(f"{i}. {zone}" for i, zone in enumerate(CANONICAL_ZONE_ORDER, start=1))


def _context_block(context: PromptContext) -> str:
    return (
        f"Room: {context.room_label}\n"
        f"Room location within the house: {context.location}\n"
        f"Floor: {context.floor}\n"
        f"Owner concerns: {context.concerns}\n"
        f"Surroundings: {context.surroundings}"
    )


def build_visual_assessment_prompt(context: PromptContext) -> str:
    count = len(CANONICAL_ZONE_ORDER)
    if context.frame_count:
        source = (
            f"You are given {context.frame_count} images of the room. Each image is preceded "
            "by a caption with the compass heading and zone it was captured in. The images "
            "may arrive in any order; use the captions to match each one to its direction."
        )
    else:
        source = "No images were captured for this room."

    return (
        f"{ASSESSMENT_PERSONA}\n\n"
        f"{source}\n\n"
        f"{_context_block(context)}\n\n"
        f"Produce a Core Vastu Assessment as a numbered list of exactly {count} items, "
        f"one per direction, in this fixed order regardless of capture order:\n"
        f"{_zone_order_lines()}\n\n"
        "For each item write one or two sentences describing what is visible in that "
        "direction, then name the 1-2 most significant Vastu defects found there. "
        "Start every item on a new line with its number followed by a period "
        "(for example '1. N: ...'). Do not add a heading, introduction or closing remarks, "
        "and do not number anything else."
    )


def _section_plan(context: PromptContext, embed_findings: bool) -> list[str]:
    if embed_findings:
        findings = (
            "## Technical Findings\nReproduce every [IMAGE_k_ANALYSIS] finding below in order, "
            "keeping each marker at the start of its line exactly as written, and expand each "
            "one with its Vastu implication."
        )
    else:
        findings = (
            "## Technical Findings\nInterpret the directional findings (they are shown to the "
            "user separately, so do not repeat them verbatim) and explain their Vastu implications."
        )

    sections = [
        "## Summary\nA short overview of the room's overall Vastu alignment.",
        findings,
        "## Recommendations\n### Critical Corrections\nDefects that need structural or "
        "placement changes.\n### Minor Adjustments\nLow-cost remedies such as colours, "
        "decor and furniture placement.",
        "## General Vastu Tips\nPractical everyday tips for this kind of room.",
    ]
    if context.cusp is not None:
        sections.append(
            f"## Cusp Zone Analysis: {context.cusp.zone} vs {context.cusp.other_zone}\n"
            f"Explain how the recommendations would differ if the room belongs to the "
            f"{context.cusp.other_zone} zone instead of {context.cusp.zone}."
        )
    return sections


def build_elaboration_prompt(
    context: PromptContext,
    tagged_assessment: str,
    *,
    embed_findings: bool = True,
) -> str:
    if context.deep_analysis:
        depth = (
            "Write a deep structural analysis: for each direction cover the governing "
            "element, structural placement (doors, windows, beams, water and fire points) "
            "and how the defects interact across zones."
        )
    else:
        depth = "Write a clear, concise standard report a homeowner can act on."

    blocks = []
    if context.cusp is not None:
        # Must be the first thing the model reads.
        blocks.append(context.cusp.describe())
    blocks.extend(
        [
            ASSESSMENT_PERSONA,
            _context_block(context),
            f"Core Vastu Assessment (tagged directional findings):\n{tagged_assessment}",
            depth,
            "Organise the report into these sections, in this order, using Markdown headings:",
            "\n\n".join(_section_plan(context, embed_findings)),
        ]
    )
    return "\n\n".join(blocks)


def build_chat_system_prompt(summary: str, knowledge_base: Mapping[str, str]) -> str:
    links = "\n".join(f"- {topic}: {url}" for topic, url in knowledge_base.items())
    return (
        f"{CHAT_PERSONA}\n\n"
        "Report summary (read-only context; do not alter or contradict it):\n"
        f"{summary or NOT_AVAILABLE}\n\n"
        "Knowledge base of approved links:\n"
        f"{links}\n\n"
        "Rules:\n"
        "- When the user's question matches a topic in the knowledge base, include that "
        "topic's link exactly as written.\n"
        "- When no topic matches, say plainly that no resource is available for it.\n"
        "- Never invent, modify or guess a link that is not in the knowledge base.\n"
        "- Keep answers short and grounded in the report summary."
    )
