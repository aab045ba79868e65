"""
Sequential bulk submission with per-row error isolation.

Rows are sent one request at a time, in order. A failing row is recorded and
the loop moves on; nothing is retried and nothing is cancelled.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional

from core.security import mask_credentials

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


class NothingToSubmitError(ValueError):
    """Raised when a bulk operation is started with no rows."""


@dataclass
class SubmissionFailure:
    index: int
    item: Any
    error: str


@dataclass
class BulkResult:
    """Success/failure accounting for one bulk run."""
    success_count: int = 0
    error_count: int = 0
    failures: List[SubmissionFailure] = field(default_factory=list)
    results: List[Any] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.success_count + self.error_count

    @property
    def all_succeeded(self) -> bool:
        return self.error_count == 0 and self.success_count > 0

    def summary(self, noun: str = "entries", action: str = "create") -> str:
        """Aggregate notification text, e.g. 'Successfully created 8 IOCs, 2 failed'."""
        if self.success_count == 0:
            return f"Failed to {action} any {noun}"
        past = action + "d" if action.endswith("e") else action + "ed"
        text = f"Successfully {past} {self.success_count} {noun}"
        if self.error_count:
            text += f", {self.error_count} failed"
        return text


def _run(items: List[Any], action: Callable[[Any], Any], label: str,
         on_progress: Optional[ProgressCallback]) -> BulkResult:
    if not items:
        raise NothingToSubmitError(f"No data to {label}")

    result = BulkResult()
    total = len(items)

    for index, item in enumerate(items):
        try:
            result.results.append(action(item))
            result.success_count += 1
        except Exception as e:
            # per-row isolation: record and continue
            message = mask_credentials(str(e)) or e.__class__.__name__
            logger.error("Failed to %s entry %d of %d: %s", label, index + 1, total, message)
            result.failures.append(SubmissionFailure(index=index, item=item, error=message))
            result.error_count += 1

        if on_progress:
            on_progress(index + 1, total)

    logger.info("Bulk %s finished: %d succeeded, %d failed",
                label, result.success_count, result.error_count)
    return result


def submit_rows(rows: Iterable[Dict[str, Any]], create: Callable[[Dict[str, Any]], Any],
                on_progress: ProgressCallback = None) -> BulkResult:
    """
    Create one record per row, sequentially.

    Args:
        rows: Validated rows in submission order
        create: Called once per row; raising marks that row as failed
        on_progress: Called with (done, total) after each row

    Returns:
        BulkResult with success/failure counts

    Raises:
        NothingToSubmitError: if rows is empty
    """
    return _run(list(rows), create, "submit", on_progress)


def delete_rows(ids: Iterable[str], delete: Callable[[str], Any],
                on_progress: ProgressCallback = None) -> BulkResult:
    """Delete records by id, sequentially, with the same policy as submit_rows."""
    return _run(list(ids), delete, "delete", on_progress)
