"""
Module: results
Purpose: Outcome records for archive, unarchive and merge operations.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


class ErrorKind(Enum):
    """Failure categories surfaced alongside a failed ArchiveResult."""

    ALREADY_ARCHIVED = "already_archived"
    NOT_ARCHIVED = "not_archived"
    CANCELLED = "cancelled"
    IO_FAILURE = "io_failure"
    PARTIAL_MERGE_FAILURE = "partial_merge_failure"


@dataclass(frozen=True)
class ArchiveResult:
    """
    Outcome of one top-level operation, returned to the caller for display.
    """

    success: bool
    message: str
    error_kind: Optional[ErrorKind] = None

    @classmethod
    def ok(cls, message: str) -> "ArchiveResult":
        return cls(success=True, message=message)

    @classmethod
    def failed(cls, message: str, kind: ErrorKind) -> "ArchiveResult":
        return cls(success=False, message=message, error_kind=kind)


@dataclass
class MergeStats:
    """
    Accumulator for a single folder merge. Created fresh per merge and
    mutated only by the merge engine while it walks the tree.
    """

    files_added: int = 0
    files_replaced: int = 0
    files_skipped: int = 0
    folders_created: int = 0
    failed_items: List[str] = field(default_factory=list)

    @property
    def files_processed(self) -> int:
        return self.files_added + self.files_replaced

    @property
    def has_failures(self) -> bool:
        return bool(self.failed_items)


@dataclass
class BatchResult:
    """
    Aggregate outcome of archive_many / unarchive_many. Keeps per-item
    results in input order.
    """

    action: str
    results: List[Tuple[str, ArchiveResult]] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return sum(1 for _, result in self.results if result.success)

    @property
    def failed(self) -> int:
        return len(self.results) - self.succeeded

    @property
    def message(self) -> str:
        return f"{self.succeeded} files {self.action}"
