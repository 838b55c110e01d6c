"""Minimal CLI to run the two-stage report pipeline on a saved scan."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from vastu_scan.config import ConfigurationError, load_config
from vastu_scan.io.image_loader import load_scan_file, load_scan_from_folder
from vastu_scan.io.results_writer import write_report
from vastu_scan.io.scan_reader import ScanPayloadError
from vastu_scan.llm_client.responses import UpstreamError, create_client
from vastu_scan.pipeline.report_processor import ReportOrchestrator
from vastu_scan.utils.logging import configure_logging


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate a Vastu report for a room scan.")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--scan", type=Path, help="JSON file with a generateReport request body")
    source.add_argument(
        "--images-dir", type=Path, help='Folder of images named by heading (e.g. "045_ne.jpg")'
    )
    parser.add_argument("--details", type=Path, help="JSON file with room details for --images-dir")
    parser.add_argument("--deep", action="store_true", help="Request the deep structural report")
    parser.add_argument(
        "--out", type=Path, default=Path("out/report.md"), help="Output path (default: out/report.md)"
    )
    parser.add_argument("--log-level", default="INFO")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    configure_logging(args.log_level)
    logger = logging.getLogger("run_report")

    try:
        if args.scan:
            scan, deep = load_scan_file(args.scan)
        else:
            details = json.loads(args.details.read_text(encoding="utf-8")) if args.details else None
            scan, deep = load_scan_from_folder(args.images_dir, details=details), False
    except (OSError, ValueError) as exc:
        sys.exit(f"Error: could not load scan: {exc}")

    config = load_config()
    try:
        client = create_client(config)
    except ConfigurationError as exc:
        sys.exit(f"Error: {exc} Add GOOGLE_API_KEY or OPENAI_API_KEY to your environment or a .env file.")

    orchestrator = ReportOrchestrator(config, client)
    try:
        report = orchestrator.generate_report(scan, deep_analysis=deep or args.deep)
    except (UpstreamError, ScanPayloadError) as exc:
        logger.error("Report generation failed: %s", exc)
        sys.exit(1)

    write_report(args.out, report)

    print("Run complete.")
    print(f"Frames: {len(scan.frames)}")
    print(f"Output: {args.out.resolve()}")


if __name__ == "__main__":
    main()
