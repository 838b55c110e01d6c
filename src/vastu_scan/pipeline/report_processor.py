"""Report processing pipeline: cusp check, visual assessment, tagging, elaboration."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from vastu_scan.config import AppConfig
from vastu_scan.io.scan_reader import ScanData
from vastu_scan.llm_client.prompts import PromptContext
from vastu_scan.llm_client.responses import UpstreamError
from vastu_scan.pipeline.core_assessment import build_frame_parts, run_core_assessment, tag_assessment
from vastu_scan.pipeline.cusp import detect_cusp
from vastu_scan.pipeline.elaboration import run_elaboration

if TYPE_CHECKING:
    from vastu_scan.llm_client.responses import LLMClient

logger = logging.getLogger(__name__)

CORE_STAGE = "Core Assessment"
FINAL_STAGE = "Final Report"
REPORT_SEPARATOR = "\n\n---\n\n"


class ReportOrchestrator:
    """Runs the two model calls for one scan, strictly one after the other.

    Stage 2 is text only; the images are sent once, in stage 1. With
    ``report_assembly == "embedded"`` the elaboration is asked to carry the
    tagged findings and its output is the whole report. With ``"stitched"``
    the tagged findings, a separator and the elaboration are concatenated.
    Any upstream failure aborts the request; no partial report is returned.
    """

    def __init__(self, config: AppConfig, client: LLMClient) -> None:
        self._config = config
        self._client = client

    @property
    def embed_findings(self) -> bool:
        return self._config.report_assembly != "stitched"

    def generate_report(self, scan: ScanData, *, deep_analysis: bool = False) -> str:
        cusp = detect_cusp(scan.location, margin=self._config.cusp_margin_degrees)
        context = PromptContext.from_scan(scan, deep_analysis=deep_analysis, cusp=cusp)
        parts = build_frame_parts(scan)
        logger.info(
            "Generating report for room=%s frames=%d deep=%s",
            context.room_label,
            context.frame_count,
            deep_analysis,
        )

        try:
            raw = run_core_assessment(
                self._client, context, parts, timeout=self._config.stage1_timeout_seconds
            )
        except UpstreamError as exc:
            raise exc.with_stage(CORE_STAGE) from exc

        tagged = tag_assessment(raw)

        try:
            elaboration = run_elaboration(
                self._client,
                context,
                tagged,
                timeout=self._config.stage2_timeout_seconds,
                embed_findings=self.embed_findings,
            )
        except UpstreamError as exc:
            raise exc.with_stage(FINAL_STAGE) from exc

        if self.embed_findings:
            return elaboration
        return f"{tagged}{REPORT_SEPARATOR}{elaboration}"
