# tests/test_image_loader.py
import json

import pytest

from vastu_scan.io.image_loader import (
    heading_from_filename,
    list_image_files,
    load_scan_file,
    load_scan_from_folder,
)
from vastu_scan.io.results_writer import write_report


@pytest.fixture
def scan_dir(tmp_path):
    d = tmp_path / "scan"
    d.mkdir()
    (d / "045_ne.jpg").write_bytes(b"\xff\xd8")
    (d / "292.5.png").write_bytes(b"\x89PNG")
    (d / "notes.txt").write_text("ignore me")
    return d


def test_list_image_files_filters_and_sorts(scan_dir):
    assert [p.name for p in list_image_files(scan_dir)] == ["045_ne.jpg", "292.5.png"]


def test_missing_folder_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        list_image_files(tmp_path / "nope")


def test_load_scan_from_folder_classifies_headings(scan_dir):
    scan = load_scan_from_folder(scan_dir, details={"roomName": "Study", "roomLocation": 200})
    assert scan.room_label == "Study"
    assert scan.location == 200
    assert [(f.heading, f.zone, f.mime_type) for f in scan.frames] == [
        (45.0, "NE", "image/jpeg"),
        (292.5, "WNW", "image/png"),
    ]


def test_heading_prefix_is_required(tmp_path):
    with pytest.raises(ValueError):
        heading_from_filename(tmp_path / "north.jpg")


def test_load_scan_file_reads_request_body(tmp_path, scan_payload):
    path = tmp_path / "scan.json"
    path.write_text(json.dumps({"isDeepAnalysis": True, "scanData": scan_payload()}))
    scan, deep = load_scan_file(path)
    assert deep is True
    assert len(scan.frames) == 2


def test_write_report_creates_parent(tmp_path):
    out = tmp_path / "out" / "report.md"
    write_report(out, "# Report")
    assert out.read_text(encoding="utf-8") == "# Report\n"
