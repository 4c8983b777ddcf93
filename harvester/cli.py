"""
Command line entry point: harvest a batch of listing URLs into bundles.
"""
import argparse
import asyncio
import os
import signal
import sys

from .config import harvester_config
from .core import CancellationToken, run_batch
from .errors import BatchCancelledError, BatchValidationError
from .export import save_output_rows, write_listing_folder, write_zip_bundle
from .fetcher import PageFetcher
from .models import BatchRequest
from .urls import get_valid_urls, validate_urls_from_text
from .utils import init_logger, now_iso


def parse_args(argv=None):
    ap = argparse.ArgumentParser(description="Truck listing harvester: extract listing pages into text+image bundles")
    ap.add_argument("urls", nargs="*", help="Listing detail page URLs")
    ap.add_argument("--url-file", type=str, default="", help="Text file with one URL per line")
    ap.add_argument("--delay-ms", type=int, default=harvester_config.INTER_REQUEST_DELAY_MS, help="Pause between requests (ms, >= 100)")
    ap.add_argument("--timeout-ms", type=int, default=harvester_config.PER_REQUEST_TIMEOUT_MS, help="Per-request timeout (ms, >= 1000)")
    ap.add_argument("--budget-ms", type=int, default=harvester_config.MAX_EXECUTION_BUDGET_MS, help="Overall execution budget (ms, 0 disables)")
    ap.add_argument("--out", type=str, default="", help="CSV/XLSX summary of extracted records")
    ap.add_argument("--bundle-dir", type=str, default="", help="Write a folder per listing under this directory")
    ap.add_argument("--zip", type=str, default="", help="Write all listings into this ZIP file")
    # Logging
    lvl_choices = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    ap.add_argument("--log-level", choices=lvl_choices, default=None,
                    help="Global log level for both console and file (overrides --log-console/--log-file).")
    ap.add_argument("--log-console", choices=lvl_choices, default=os.getenv("LOG_CONSOLE", "INFO"),
                    help="Console log level (default from env LOG_CONSOLE or INFO).")
    ap.add_argument("--log-file", choices=lvl_choices, default=os.getenv("LOG_FILE", "DEBUG"),
                    help="File log level (default from env LOG_FILE or DEBUG).")
    ap.add_argument("--log-file-path", default=os.getenv("LOG_FILE_PATH", "harvester.log"),
                    help="Path to log file (default from env LOG_FILE_PATH or harvester.log).")
    ap.add_argument("--no-file-log", action="store_true",
                    help="Disable file logging (only console output).")
    return ap.parse_args(argv)


def collect_urls(args, logger) -> list:
    """Validate URLs from arguments and --url-file; invalid or duplicate lines are reported and dropped."""
    lines = list(args.urls)
    if args.url_file:
        with open(args.url_file, encoding="utf-8") as f:
            lines.extend(f.read().splitlines())

    results = validate_urls_from_text("\n".join(lines))
    for r in results:
        if r.error:
            logger.warning(f">>> Skipping {r.url}: {r.error}")
    return get_valid_urls(results)


async def harvest(args, urls, logger) -> int:
    request = BatchRequest(
        urls=urls,
        inter_request_delay_ms=args.delay_ms,
        per_request_timeout_ms=args.timeout_ms,
    )
    token = CancellationToken()
    try:
        asyncio.get_running_loop().add_signal_handler(signal.SIGINT, token.cancel)
    except (NotImplementedError, RuntimeError):
        pass  # e.g. Windows event loops

    async with PageFetcher(min_body_length=harvester_config.MIN_BODY_LENGTH, logger=logger) as fetcher:
        try:
            result = await run_batch(
                request,
                fetcher.fetch_and_parse,
                max_execution_budget_ms=args.budget_ms or None,
                cancel_token=token,
                logger=logger,
            )
        except BatchCancelledError as e:
            logger.warning(f">>> Cancelled; {len(e.partial.records)} record(s) kept")
            result = e.partial

        async def fetch_image(url):
            return await fetcher.fetch_bytes(url, harvester_config.IMAGE_TIMEOUT_MS)

        if args.bundle_dir:
            for rec in result.records:
                await write_listing_folder(rec, args.bundle_dir, fetch_image, logger=logger)
        if args.zip:
            await write_zip_bundle(result.records, args.zip, fetch_image, logger=logger)

    if args.out:
        save_output_rows(result.records, args.out, logger=logger)

    for rec in result.records:
        if rec.error:
            logger.info(f"FAILED {rec.source_url} | {rec.error}")
        else:
            logger.info(f"OK {rec.registration_number} | {rec.display_name} | {rec.price.label} | {len(rec.images)} images")

    return 0 if result.summary.failed == 0 else 1


def main(argv=None) -> int:
    args = parse_args(argv)
    eff_console = args.log_level or args.log_console
    eff_file = args.log_level or args.log_file
    logger = init_logger(
        console_level=eff_console,
        file_level=eff_file,
        log_file=None if args.no_file_log else args.log_file_path
    )
    logger.info(f">>> Run started at {now_iso()}")

    urls = collect_urls(args, logger)
    try:
        return asyncio.run(harvest(args, urls, logger))
    except BatchValidationError as e:
        logger.error(f">>> Invalid batch: {e}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
