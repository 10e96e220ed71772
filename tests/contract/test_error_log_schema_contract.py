from __future__ import annotations

import json
import re
from pathlib import Path

from pricelist_diff.logging.error_log import ErrorLogBuffer, ErrorRecord

"""Error log contract: one JSON object per line, fixed key set."""

REQUIRED_KEYS = {"timestamp", "file", "operation", "row", "error_type", "message"}
TIMESTAMP_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?Z$")
ERROR_TYPE_RE = re.compile(r"^[A-Z][A-Z_]*$")


def test_error_log_lines_follow_contract(tmp_path: Path):
    buf = ErrorLogBuffer(logs_dir=tmp_path)
    buf.append(ErrorRecord.create("a.xlsx", "transform", -1, "CODEC_ERROR", "bad zip"))
    buf.append(ErrorRecord.create("base.xlsx", "compare", -1, "COMPARISON_ERROR", "comparison timed out"))
    path = buf.flush()

    for line in path.read_text(encoding="utf-8").splitlines():
        obj = json.loads(line)
        assert set(obj) == REQUIRED_KEYS
        assert TIMESTAMP_RE.match(obj["timestamp"])
        assert ERROR_TYPE_RE.match(obj["error_type"])
        assert isinstance(obj["row"], int)
        assert obj["operation"] in {"transform", "compare", "store", "export"}


def test_unknown_row_is_minus_one(tmp_path: Path):
    rec = ErrorRecord.create("a.xlsx", "transform", -1, "CODEC_ERROR", "x")
    assert json.loads(rec.to_json_line())["row"] == -1
