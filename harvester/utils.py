"""
Utility functions for amount parsing, price formatting, and logging.
"""
import logging
import re
from datetime import datetime, timezone
from typing import Optional


def init_logger(
    name: str = "harvester",
    console_level: str = "INFO",
    file_level: str = "DEBUG",
    log_file: Optional[str] = "harvester.log"
) -> logging.Logger:
    """Initialize logger with console and optional file handlers."""
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)
    if logger.handlers:
        return logger

    console_level_num = getattr(logging, console_level.upper(), logging.INFO)
    ch = logging.StreamHandler()
    ch.setLevel(console_level_num)

    fmt = logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    if log_file:  # Create file handler only if log_file is provided
        file_level_num = getattr(logging, file_level.upper(), logging.DEBUG)
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_level_num)
        fh.setFormatter(fmt)
        logger.addHandler(fh)

    return logger


def now_iso() -> str:
    """Return current UTC timestamp in ISO format."""
    return datetime.now(timezone.utc).isoformat()


def parse_leading_int(text: Optional[str]) -> int:
    """
    Parse an amount like "3,550" or "1 200만" into an int.

    Thousands separators and whitespace are removed first, then the leading
    digits are read. Anything without leading digits yields 0.
    """
    if not text:
        return 0
    s = re.sub(r"[,\s]", "", text)
    m = re.match(r"\d+", s)
    return int(m.group(0)) if m else 0


def round_half_up(numerator: int, denominator: int) -> int:
    """Integer division rounded half away from zero for non-negative inputs."""
    return (2 * numerator + denominator) // (2 * denominator)


def format_price_label(amount: int) -> str:
    """3550 -> "3,550만원" (amount in units of 10,000 won)."""
    return f"{amount:,}만원"


def compact_price_label(amount: int) -> str:
    """
    Abbreviated price label, amount in units of 10,000 won.

    12300 -> "1.2억", 1500 -> "1.5천만", 999 -> "999만원".
    Rounding can carry into the next digit (9999 -> "9.10천만"); that
    output is kept as is.
    """
    if amount >= 10000:
        billions = amount // 10000
        remainder = amount % 10000
        if remainder == 0:
            return f"{billions}억"
        thousands = round_half_up(remainder, 1000)
        if thousands == 0:
            return f"{billions}억"
        return f"{billions}.{thousands}억"

    if amount >= 1000:
        thousands = amount // 1000
        hundreds = round_half_up(amount % 1000, 100)
        if hundreds == 0:
            return f"{thousands}천만"
        return f"{thousands}.{hundreds}천만"

    return format_price_label(amount)
