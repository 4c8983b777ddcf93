"""
API route handlers for batch listing extraction.
"""
import logging
from fastapi import APIRouter, HTTPException, Depends
from fastapi.responses import StreamingResponse

from harvester.core import run_batch
from harvester.errors import BatchValidationError
from harvester.export import records_to_frame
from harvester.fetcher import PageFetcher
from harvester.models import BatchRequest, BatchResult
from harvester.urls import get_valid_urls, validate_urls_from_text

from ..models import ParseRequest, ParseResponse, ValidateUrlsRequest, ValidateUrlsResponse, UrlCheckOut
from ..config import config

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["parse"])

FIELD_NAMES = {f.alias or name: name for name, f in ParseRequest.model_fields.items()}

def validation_error_detail(errors) -> dict:
    """Turn request-schema errors into the same body an invalid batch gets."""
    first = errors[0] if errors else {}
    loc = [p for p in first.get("loc", ()) if p != "body"]
    constraint = "body"
    if loc and isinstance(loc[0], str):
        constraint = FIELD_NAMES.get(loc[0], loc[0])
        for p in loc[1:]:
            constraint += f"[{p}]" if isinstance(p, int) else f".{p}"
    message = f"{constraint}: {first.get('msg', 'invalid request')}"
    return {"error": message, "code": "VALIDATION_ERROR", "constraint": constraint}

def get_page_fetcher() -> PageFetcher:
    """Dependency providing an (unopened) page fetcher for one batch."""
    return PageFetcher(min_body_length=config.MIN_BODY_LENGTH, logger=logger)

def build_batch_request(body: ParseRequest) -> BatchRequest:
    """Fill tier defaults and validate; raises HTTP 400 on an invalid batch."""
    request = BatchRequest(
        urls=body.urls,
        inter_request_delay_ms=(
            config.INTER_REQUEST_DELAY_MS if body.inter_request_delay_ms is None else body.inter_request_delay_ms
        ),
        per_request_timeout_ms=(
            config.PER_REQUEST_TIMEOUT_MS if body.per_request_timeout_ms is None else body.per_request_timeout_ms
        ),
    )
    try:
        request.validate()
    except BatchValidationError as e:
        logger.info(f"Rejected batch: {e}")
        raise HTTPException(
            status_code=400,
            detail={"error": str(e), "code": "VALIDATION_ERROR", "constraint": e.constraint},
        )
    return request

async def execute_batch(request: BatchRequest, fetcher) -> BatchResult:
    async with fetcher:
        return await run_batch(
            request,
            fetcher.fetch_and_parse,
            max_execution_budget_ms=config.MAX_EXECUTION_BUDGET_MS,
            logger=logger,
        )

@router.post("/parse-truck", response_model=ParseResponse)
async def parse_truck(body: ParseRequest, fetcher=Depends(get_page_fetcher)):
    """Fetch and extract every URL of the batch, in order."""
    request = build_batch_request(body)
    try:
        result = await execute_batch(request, fetcher)
        return ParseResponse.from_result(result)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error running batch of {len(request.urls)} URLs: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

@router.post("/export/csv")
async def export_records_csv(body: ParseRequest, fetcher=Depends(get_page_fetcher)):
    """Run a batch and return its records as CSV."""
    request = build_batch_request(body)
    try:
        result = await execute_batch(request, fetcher)
        df = records_to_frame(result.records)
        csv_content = df.to_csv(index=False).encode('utf-8-sig')

        return StreamingResponse(
            iter([csv_content]),
            media_type='text/csv',
            headers={'Content-Disposition': 'attachment; filename="truck_listings.csv"'}
        )

    except Exception as e:
        logger.error(f"Error exporting CSV: {e}")
        raise HTTPException(status_code=500, detail="Error generating CSV export")

@router.post("/validate-urls", response_model=ValidateUrlsResponse)
async def validate_urls(body: ValidateUrlsRequest):
    """Check pasted URLs (one per line) before starting a batch."""
    results = validate_urls_from_text(body.text)
    return ValidateUrlsResponse(
        results=[
            UrlCheckOut(url=r.url, is_valid=r.is_valid, is_duplicate=r.is_duplicate, error=r.error)
            for r in results
        ],
        valid_urls=get_valid_urls(results),
    )
