"""
Batch orchestration: fetch, extract and record listing pages one by one.
"""
import asyncio
import time
from typing import Awaitable, Callable, List, Optional

from .document import ParsedDocument
from .errors import BatchCancelledError, ExtractionError, FetchError
from .extractor import extract_listing
from .models import BatchRequest, BatchResult, BatchSummary, ListingRecord, ProgressEvent


FetchAndParse = Callable[[str, int], Awaitable[ParsedDocument]]
ProgressObserver = Callable[[ProgressEvent], None]

BUDGET_EXCEEDED_MESSAGE = "Stopped: overall execution time budget exceeded"
BUDGET_INSUFFICIENT_MESSAGE = "Stopped: not enough execution time left for this item"
CANCELLED_MESSAGE = "Cancelled by caller"


class CancellationToken:
    """Cooperative cancellation signal shared by a batch run."""

    def __init__(self):
        self._event = asyncio.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    async def wait(self) -> None:
        await self._event.wait()

    async def sleep(self, seconds: float) -> bool:
        """Sleep for `seconds` unless cancelled first. Returns True if cancelled."""
        if self.cancelled:
            return True
        try:
            await asyncio.wait_for(self._event.wait(), timeout=seconds)
            return True
        except asyncio.TimeoutError:
            return False


def summarize(records: List[ListingRecord], started: float) -> BatchSummary:
    succeeded = sum(1 for r in records if r.error is None)
    return BatchSummary(
        total=len(records),
        succeeded=succeeded,
        failed=len(records) - succeeded,
        execution_time_ms=int((time.monotonic() - started) * 1000),
    )


async def fetch_and_extract(fetch_and_parse: FetchAndParse, url: str, timeout_ms: int) -> ListingRecord:
    """Fetch one page under a hard timeout and turn it into a record."""
    try:
        doc = await asyncio.wait_for(fetch_and_parse(url, timeout_ms), timeout=timeout_ms / 1000)
    except asyncio.TimeoutError as e:
        raise FetchError(f"Request timed out after {timeout_ms}ms", url=url) from e
    return ListingRecord.from_fields(url, extract_listing(doc))


async def _process_item(
    fetch_and_parse: FetchAndParse,
    url: str,
    timeout_ms: int,
    cancel_token: CancellationToken,
    logger=None
) -> ListingRecord:
    """Process a single URL; any per-item failure becomes an error record."""
    work = asyncio.ensure_future(fetch_and_extract(fetch_and_parse, url, timeout_ms))
    waiter = asyncio.ensure_future(cancel_token.wait())
    try:
        await asyncio.wait({work, waiter}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        waiter.cancel()

    if not work.done():
        # cancelled mid-fetch
        work.cancel()
        await asyncio.gather(work, return_exceptions=True)
        return ListingRecord.failed(url, CANCELLED_MESSAGE, "cancelled")

    try:
        return work.result()
    except FetchError as e:
        msg, kind = str(e), e.kind
    except ExtractionError as e:
        msg, kind = str(e), e.kind
    except Exception as e:
        msg, kind = str(e) or type(e).__name__, "fetch"

    if logger:
        logger.warning(f">>> Failed {url}: {msg}")
    return ListingRecord.failed(url, msg, kind)


async def run_batch(
    request: BatchRequest,
    fetch_and_parse: FetchAndParse,
    max_execution_budget_ms: Optional[int] = None,
    cancel_token: Optional[CancellationToken] = None,
    on_progress: Optional[ProgressObserver] = None,
    logger=None
) -> BatchResult:
    """
    Main batch orchestration function.

    Processes `request.urls` strictly in order with a pause of
    `inter_request_delay_ms` between items (none before the first) and a
    hard per-item timeout. Every URL yields exactly one record. When the
    overall execution budget runs out, the current and all remaining URLs
    are recorded as budget errors without being fetched.

    Raises BatchValidationError before any fetch if the request is invalid,
    and BatchCancelledError (with the partial result) if `cancel_token`
    fires.
    """
    request.validate()

    cancel_token = cancel_token or CancellationToken()
    budget_token = CancellationToken()
    loop = asyncio.get_running_loop()
    budget_timer = None
    if max_execution_budget_ms is not None:
        budget_timer = loop.call_later(max_execution_budget_ms / 1000, budget_token.cancel)

    delay_s = request.inter_request_delay_ms / 1000
    timeout_ms = request.per_request_timeout_ms
    total = len(request.urls)
    records: List[ListingRecord] = []
    started = time.monotonic()

    if logger:
        logger.info(
            f">>> Batch started: {total} URLs, delay={request.inter_request_delay_ms}ms, "
            f"timeout={timeout_ms}ms, budget={max_execution_budget_ms}ms"
        )

    def record(url: str, rec: ListingRecord):
        records.append(rec)
        if on_progress:
            on_progress(ProgressEvent(index=len(records), total=total, url=url, record=rec))

    def partial() -> BatchResult:
        return BatchResult(records=list(records), summary=summarize(records, started))

    def budget_stop_reason(index: int) -> Optional[str]:
        if budget_token.cancelled:
            return BUDGET_EXCEEDED_MESSAGE
        if max_execution_budget_ms is None:
            return None
        elapsed_ms = (time.monotonic() - started) * 1000
        needed_ms = timeout_ms + (request.inter_request_delay_ms if index > 0 else 0)
        if max_execution_budget_ms - elapsed_ms < needed_ms:
            return BUDGET_INSUFFICIENT_MESSAGE
        return None

    try:
        for i, url in enumerate(request.urls):
            if cancel_token.cancelled:
                raise BatchCancelledError(partial())

            reason = budget_stop_reason(i)
            if reason:
                if logger:
                    logger.warning(f">>> {reason}; skipping {total - i} remaining URL(s)")
                for rest in request.urls[i:]:
                    record(rest, ListingRecord.failed(rest, reason, "budget"))
                break

            if i > 0 and await cancel_token.sleep(delay_s):
                raise BatchCancelledError(partial())

            if logger:
                logger.info(f">>> [{i + 1}/{total}] Fetching {url}")
            rec = await _process_item(fetch_and_parse, url, timeout_ms, cancel_token, logger=logger)
            record(url, rec)

            if rec.error_kind == "cancelled":
                raise BatchCancelledError(partial())
    finally:
        if budget_timer is not None:
            budget_timer.cancel()

    result = partial()
    if logger:
        s = result.summary
        logger.info(f">>> Batch finished: {s.succeeded}/{s.total} succeeded, {s.failed} failed in {s.execution_time_ms}ms")
    return result
