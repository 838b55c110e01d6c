"""Pipeline stage 2: text-only elaboration of the tagged assessment."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from vastu_scan.llm_client.prompts import PromptContext, build_elaboration_prompt
from vastu_scan.llm_client.schemas import TextPart

if TYPE_CHECKING:
    from vastu_scan.llm_client.responses import LLMClient

logger = logging.getLogger(__name__)

FALLBACK_REPORT = "The detailed report could not be generated. Please rescan."


def run_elaboration(
    client: LLMClient,
    context: PromptContext,
    tagged_assessment: str,
    *,
    timeout: float,
    embed_findings: bool,
) -> str:
    prompt = build_elaboration_prompt(context, tagged_assessment, embed_findings=embed_findings)
    logger.info("Running elaboration (deep=%s, cusp=%s)", context.deep_analysis, context.cusp is not None)
    output = client.generate([TextPart(prompt)], timeout=timeout)
    if not output:
        logger.warning("Elaboration returned no text; using fallback")
        return FALLBACK_REPORT
    return output
