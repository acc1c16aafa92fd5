from __future__ import annotations

import csv
import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from mcmeta.common.time import run_id_for, utc_now, utc_now_iso

LOG_SCHEMA_VERSION = 1

# Stable CSV column order (append-only evolution: only add new columns at the end)
CSV_COLUMNS: List[str] = [
    "schema_version",
    "timestamp",
    "run_id",
    "operation",
    "command",
    "input",
    "output",
    "ok",
    "error_code",
    "message",
]


@dataclass(frozen=True)
class CodecEvent:
    schema_version: int
    timestamp: str
    run_id: str

    # What ran
    operation: str  # "build" | "parse"
    command: str  # meta command checked against, "" when none
    input: str  # space-joined tokens as given
    output: str  # built flag string, or JSON of the decoded result

    # Outcome
    ok: bool
    error_code: Optional[str]
    message: str

    # Decoded result for replay/debug (kept in JSONL only)
    data: Dict[str, Any]

    @staticmethod
    def make(
        *,
        run_id: str,
        operation: str,
        input: str,
        ok: bool,
        command: str = "",
        output: str = "",
        error_code: Optional[str] = None,
        message: str = "",
        data: Optional[Dict[str, Any]] = None,
    ) -> "CodecEvent":
        return CodecEvent(
            schema_version=LOG_SCHEMA_VERSION,
            timestamp=utc_now_iso(),
            run_id=run_id,
            operation=operation,
            command=command,
            input=input,
            output=output,
            ok=bool(ok),
            error_code=error_code,
            message=message,
            data=data or {},
        )

    def to_csv_row(self) -> Dict[str, Any]:
        d = asdict(self)
        d.pop("data", None)  # CSV is flat
        return d


class CodecLogger:
    """Append-only logger: one JSONL row per codec call + mirrored CSV row."""

    def __init__(self, run_dir: Path) -> None:
        self.run_dir = run_dir
        self.run_dir.mkdir(parents=True, exist_ok=True)
        self.jsonl_path = self.run_dir / "events.jsonl"
        self.csv_path = self.run_dir / "events.csv"

        if not self.csv_path.exists():
            with self.csv_path.open("w", newline="", encoding="utf-8") as f:
                csv.DictWriter(f, fieldnames=CSV_COLUMNS).writeheader()

    def log(self, ev: CodecEvent) -> None:
        with self.jsonl_path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(asdict(ev), ensure_ascii=False) + "\n")

        with self.csv_path.open("a", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=CSV_COLUMNS)
            row = ev.to_csv_row()
            writer.writerow({k: row.get(k, "") for k in CSV_COLUMNS})


def open_run(base_dir: Path) -> Tuple[str, CodecLogger]:
    """Create ``base_dir/<run_id>/`` and return (run_id, logger) for it."""
    run_id = run_id_for(utc_now())
    return run_id, CodecLogger(base_dir / run_id)
