"""
Data models for the truck listing harvester.
"""
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .errors import BatchValidationError
from .urls import is_absolute_url


ERROR_SENTINEL = "Error"

MIN_INTER_REQUEST_DELAY_MS = 100
MIN_PER_REQUEST_TIMEOUT_MS = 1000


@dataclass(frozen=True)
class Price:
    """Listing price; the source quotes amounts in units of 10,000 won (만원)."""

    amount_ten_thousand_won: int
    amount_won: int
    label: str
    compact_label: str


@dataclass(frozen=True)
class ListingFields:
    """Everything the field extractor derives from one listing page."""

    category_name: str
    display_name: str
    registration_number: str
    price: Price
    model_year: str
    odometer_reading: str
    options_text: str
    images: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ListingRecord:
    """One output record per requested URL, either fully extracted or an error."""

    source_url: str
    category_name: str
    display_name: str
    registration_number: str
    price: Price
    model_year: str
    odometer_reading: str
    options_text: str
    images: Tuple[str, ...] = ()
    error: Optional[str] = None
    error_kind: Optional[str] = None

    @classmethod
    def from_fields(cls, source_url: str, fields: ListingFields) -> "ListingRecord":
        return cls(
            source_url=source_url,
            category_name=fields.category_name,
            display_name=fields.display_name,
            registration_number=fields.registration_number,
            price=fields.price,
            model_year=fields.model_year,
            odometer_reading=fields.odometer_reading,
            options_text=fields.options_text,
            images=tuple(fields.images),
        )

    @classmethod
    def failed(cls, source_url: str, message: str, kind: str) -> "ListingRecord":
        """Error record: every data field carries the fixed error sentinel."""
        return cls(
            source_url=source_url,
            category_name=ERROR_SENTINEL,
            display_name=ERROR_SENTINEL,
            registration_number=ERROR_SENTINEL,
            price=Price(0, 0, "0만원", "0만원"),
            model_year=ERROR_SENTINEL,
            odometer_reading=ERROR_SENTINEL,
            options_text=ERROR_SENTINEL,
            images=(),
            error=message or "Unknown error",
            error_kind=kind,
        )


@dataclass
class BatchRequest:
    """A batch of listing URLs plus pacing and timeout settings."""

    urls: List[str]
    inter_request_delay_ms: int = 1000
    per_request_timeout_ms: int = 10000

    def validate(self) -> None:
        """Raise BatchValidationError naming the first violated constraint."""
        if not self.urls:
            raise BatchValidationError("urls", "at least one URL is required")
        for i, url in enumerate(self.urls):
            if not isinstance(url, str) or not is_absolute_url(url):
                raise BatchValidationError(f"urls[{i}]", f"not a well-formed absolute URL: {url!r}")
        if self.inter_request_delay_ms < MIN_INTER_REQUEST_DELAY_MS:
            raise BatchValidationError(
                "inter_request_delay_ms", f"must be >= {MIN_INTER_REQUEST_DELAY_MS}"
            )
        if self.per_request_timeout_ms < MIN_PER_REQUEST_TIMEOUT_MS:
            raise BatchValidationError(
                "per_request_timeout_ms", f"must be >= {MIN_PER_REQUEST_TIMEOUT_MS}"
            )


@dataclass(frozen=True)
class BatchSummary:
    total: int
    succeeded: int
    failed: int
    execution_time_ms: int


@dataclass(frozen=True)
class BatchResult:
    records: List[ListingRecord] = field(default_factory=list)
    summary: Optional[BatchSummary] = None


@dataclass(frozen=True)
class ProgressEvent:
    """Delivered to the progress observer after each record is appended."""

    index: int
    total: int
    url: str
    record: ListingRecord
