"""
Truck Listing Harvester Package
"""
from .models import (
    BatchRequest,
    BatchResult,
    BatchSummary,
    ListingFields,
    ListingRecord,
    Price,
    ProgressEvent
)
from .errors import (
    HarvesterError,
    BatchValidationError,
    FetchError,
    BlockedContentError,
    ExtractionError,
    BatchCancelledError
)
from .document import ParsedDocument, parse_document
from .extractor import extract_listing
from .core import CancellationToken, run_batch
from .urls import validate_url, validate_urls_from_text, get_valid_urls
from .utils import init_logger, now_iso

__version__ = "1.0.0"

__all__ = [
    "BatchRequest",
    "BatchResult",
    "BatchSummary",
    "ListingFields",
    "ListingRecord",
    "Price",
    "ProgressEvent",
    "HarvesterError",
    "BatchValidationError",
    "FetchError",
    "BlockedContentError",
    "ExtractionError",
    "BatchCancelledError",
    "ParsedDocument",
    "parse_document",
    "extract_listing",
    "CancellationToken",
    "run_batch",
    "validate_url",
    "validate_urls_from_text",
    "get_valid_urls",
    "init_logger",
    "now_iso"
]
