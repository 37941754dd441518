"""Per-row outcome aggregation for import and update batches."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class RowError:
    """A spreadsheet row that failed, by 1-based physical row number."""

    row: int
    error: str


@dataclass
class BatchResult:
    """Aggregate outcome of one import or update batch.

    - total:      data rows seen (rows after the header row)
    - successful: rows written to the store
    - failed:     rows rejected (store error, lookup error, invalid data)
    - not_found:  update rows whose business key matched no owned record
    - skipped:    rows deliberately ignored (missing key fields, nothing to update)
    """

    message: str
    total: int = 0
    successful: int = 0
    failed: int = 0
    not_found: int = 0
    skipped: int = 0
    errors: list[RowError] = field(default_factory=list)
    report_not_found: bool = False

    def add_success(self) -> None:
        self.successful += 1

    def add_failure(self, row: int, error: str) -> None:
        self.failed += 1
        self.errors.append(RowError(row=row, error=error))

    def add_not_found(self) -> None:
        self.not_found += 1

    def add_skip(self) -> None:
        self.skipped += 1

    def to_payload(self) -> dict[str, Any]:
        """Serialise to the JSON body returned to the dashboard."""
        payload: dict[str, Any] = {
            "message": self.message,
            "total": self.total,
            "successful": self.successful,
            "failed": self.failed,
            "skipped": self.skipped,
        }
        if self.report_not_found:
            payload["notFound"] = self.not_found
        if self.errors:
            payload["errors"] = [{"row": e.row, "error": e.error} for e in self.errors]
        return payload
