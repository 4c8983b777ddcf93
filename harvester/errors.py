"""
Exception hierarchy for the harvester.

Per-item failures (fetch, blocked content, extraction) are converted into
error records by the orchestrator; only validation and cancellation end a
batch early.
"""
from typing import Optional


class HarvesterError(Exception):
    """Base class for all harvester errors."""


class BatchValidationError(HarvesterError):
    """The batch request is malformed; nothing was fetched."""

    def __init__(self, constraint: str, message: str):
        self.constraint = constraint
        super().__init__(f"{constraint}: {message}")


class FetchError(HarvesterError):
    """Network failure, non-2xx response or timeout for one URL."""

    kind = "fetch"

    def __init__(self, message: str, url: Optional[str] = None, status: Optional[int] = None):
        self.url = url
        self.status = status
        super().__init__(message)


class BlockedContentError(FetchError):
    """The response looks like a bot challenge page or is suspiciously short."""

    kind = "blocked"


class ExtractionError(HarvesterError):
    """Field extraction failed on an otherwise successful fetch."""

    kind = "extraction"


class BatchCancelledError(HarvesterError):
    """The caller cancelled the batch; `partial` holds what was recorded so far."""

    def __init__(self, partial=None):
        self.partial = partial
        super().__init__("Batch cancelled by caller")
