"""
Pydantic models for API request/response serialization.
"""
from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field

from harvester.models import BatchResult, ListingRecord

class ParseRequest(BaseModel):
    """Batch request; camelCase and snake_case field names are both accepted."""
    model_config = ConfigDict(populate_by_name=True)

    urls: List[str]
    inter_request_delay_ms: Optional[int] = Field(None, alias="interRequestDelayMs")
    per_request_timeout_ms: Optional[int] = Field(None, alias="perRequestTimeoutMs")

class PriceOut(BaseModel):
    amount_ten_thousand_won: int
    amount_won: int
    label: str
    compact_label: str

class ListingOut(BaseModel):
    """Output model for one listing record."""
    source_url: str
    category_name: str
    display_name: str
    registration_number: str
    price: PriceOut
    model_year: str
    odometer_reading: str
    options_text: str
    images: List[str] = []
    error: Optional[str] = None
    error_kind: Optional[str] = None

    @classmethod
    def from_record(cls, rec: ListingRecord) -> "ListingOut":
        return cls(
            source_url=rec.source_url,
            category_name=rec.category_name,
            display_name=rec.display_name,
            registration_number=rec.registration_number,
            price=PriceOut(
                amount_ten_thousand_won=rec.price.amount_ten_thousand_won,
                amount_won=rec.price.amount_won,
                label=rec.price.label,
                compact_label=rec.price.compact_label,
            ),
            model_year=rec.model_year,
            odometer_reading=rec.odometer_reading,
            options_text=rec.options_text,
            images=list(rec.images),
            error=rec.error,
            error_kind=rec.error_kind,
        )

class SummaryOut(BaseModel):
    total: int
    succeeded: int
    failed: int
    execution_time_ms: int

class ParseResponse(BaseModel):
    """Response model for a batch run."""
    success: bool = True
    records: List[ListingOut]
    summary: SummaryOut

    @classmethod
    def from_result(cls, result: BatchResult) -> "ParseResponse":
        s = result.summary
        return cls(
            records=[ListingOut.from_record(r) for r in result.records],
            summary=SummaryOut(
                total=s.total,
                succeeded=s.succeeded,
                failed=s.failed,
                execution_time_ms=s.execution_time_ms,
            ),
        )

class ValidateUrlsRequest(BaseModel):
    text: str

class UrlCheckOut(BaseModel):
    url: str
    is_valid: bool
    is_duplicate: bool
    error: Optional[str] = None

class ValidateUrlsResponse(BaseModel):
    results: List[UrlCheckOut]
    valid_urls: List[str]
