from __future__ import annotations
import json
import re
from pathlib import Path
from pricelist_diff.logging.error_log import ErrorLogBuffer, ErrorRecord

KEYS = {"timestamp", "file", "operation", "row", "error_type", "message"}


def test_error_record_creation_and_json_line():
    rec = ErrorRecord.create(
        file="lista.xlsx",
        operation="transform",
        row=-1,
        error_type="CODEC_ERROR",
        message="no sheets",
    )
    data = json.loads(rec.to_json_line())
    assert data["file"] == "lista.xlsx"
    assert data["operation"] == "transform"
    assert data["row"] == -1
    assert data["timestamp"].endswith("Z")
    assert set(data.keys()) == KEYS


def test_non_ascii_message_kept_readable():
    rec = ErrorRecord.create("año.xlsx", "compare", 3, "COMPARISON_ERROR", "sin año")
    assert "año" in rec.to_json_line()


def test_error_log_buffer_flush(temp_workdir: Path):
    buf = ErrorLogBuffer()
    buf.append(ErrorRecord.create("a.xlsx", "transform", -1, "CODEC_ERROR", "bad zip"))
    buf.append(ErrorRecord.create("b.xlsx", "store", -1, "STORE_ERROR", "down"))
    path = buf.flush()
    assert path.exists()
    assert path.parent.resolve() == (temp_workdir / "logs").resolve()
    assert re.fullmatch(r"errors-\d{8}-\d{6}\.log", path.name)
    lines = path.read_text(encoding="utf-8").strip().splitlines()
    assert len(lines) == 2
    for raw in lines:
        assert set(json.loads(raw).keys()) == KEYS
    assert len(buf) == 0


def test_flush_without_records_writes_nothing(tmp_path: Path):
    buf = ErrorLogBuffer(logs_dir=tmp_path / "logs")
    assert buf.flush() is None
    assert not (tmp_path / "logs").exists()


def test_multiple_flushes_append_to_same_file(tmp_path: Path):
    buf = ErrorLogBuffer(logs_dir=tmp_path)
    buf.append(ErrorRecord.create("f.xlsx", "compare", -1, "COMPARISON_ERROR", "x"))
    path = buf.flush()
    size1 = path.stat().st_size
    buf.append(ErrorRecord.create("f.xlsx", "compare", -1, "COMPARISON_ERROR", "y"))
    path2 = buf.flush()
    assert path == path2
    assert path2.stat().st_size > size1
    assert len(buf.records) == 0
