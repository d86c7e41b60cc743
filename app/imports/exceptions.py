"""Exceptions raised by the bulk import pipeline."""

from typing import Any


class ImportInputError(Exception):
    """The request cannot be processed at all (no CSV, bad headers, bad mode).

    Args:
        error: Short description returned under ``error``.
        details: Extra fields merged into the 400 response body.
    """

    def __init__(self, error: str, **details: Any):
        super().__init__(error)
        self.error = error
        self.details = details


class BatchNotFoundError(Exception):
    """Undo target is unknown, already undone, or outside the recency window."""

    def __init__(self, batch_id: str, window_days: int = 7):
        self.batch_id = batch_id
        self.window_days = window_days
        super().__init__(f"Batch not found or too old to undo (>{_window_label(window_days)})")


def _window_label(days: int) -> str:
    return "1 week" if days == 7 else f"{days} days"
