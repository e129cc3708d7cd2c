"""
Module: reporting
Purpose: Logging and batch report utilities.
"""

import json
import os
from dataclasses import asdict, is_dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, List

from .models.results import BatchResult


ARTIFACTS_DIR = "artifacts"
LOG_FILE_NAME = os.path.join(ARTIFACTS_DIR, "simple_archiver.log")
REPORT_SCHEMA_VERSION = "1.0"


def ensure_log_initialized() -> str:
    """Ensure the archiver log file exists and return its absolute path."""
    path = os.path.abspath(LOG_FILE_NAME)
    directory = os.path.dirname(path) or "."
    os.makedirs(directory, exist_ok=True)
    with open(path, "a", encoding="utf-8"):
        pass
    return path


def write_log(entries: List[str], outfile: str = LOG_FILE_NAME):
    """
    Append entries to logfile.
    """
    directory = os.path.dirname(os.path.abspath(outfile)) or "."
    os.makedirs(directory, exist_ok=True)
    timestamp = datetime.now(timezone.utc).isoformat()
    with open(outfile, "a", encoding="utf-8") as handle:
        for entry in entries:
            normalized = entry if entry.startswith("[") else f"[INFO] {entry}"
            handle.write(f"[{timestamp}] {normalized}\n")


class EnhancedJSONEncoder(json.JSONEncoder):
    def default(self, o: Any) -> Any:
        if is_dataclass(o):
            return asdict(o)
        if isinstance(o, Enum):
            return o.value
        return super().default(o)


def batch_report_payload(batch: BatchResult, archive_folder: str) -> dict[str, Any]:
    entries = [
        {
            "path": path,
            "success": result.success,
            "message": result.message,
            "error_kind": result.error_kind,
        }
        for path, result in batch.results
    ]
    return {
        "schema_version": REPORT_SCHEMA_VERSION,
        "generated_at": datetime.now().isoformat(),
        "action": batch.action,
        "archive_folder": archive_folder,
        "counts": {
            "total": len(batch.results),
            "succeeded": batch.succeeded,
            "failed": batch.failed,
        },
        "entries": entries,
    }


def write_batch_report(batch: BatchResult, outfile: str, archive_folder: str):
    """
    Save the per-item outcome of a batch operation as JSON.
    """
    os.makedirs(os.path.dirname(os.path.abspath(outfile)) or ".", exist_ok=True)
    report = batch_report_payload(batch, archive_folder)
    with open(outfile, "w", encoding="utf-8") as handle:
        json.dump(report, handle, indent=2, cls=EnhancedJSONEncoder)
    write_log([f"[INFO] Batch report saved to {os.path.abspath(outfile)}"])
