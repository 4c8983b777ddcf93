"""
URL validation for listing pages.
"""
import ipaddress
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple
from urllib.parse import parse_qs, urlparse


ALLOWED_DOMAINS = ("www.truck-no1.co.kr",)
ALLOWED_PATHS = ("/model/DetailView.asp",)
REQUIRED_PARAMS = ("ShopNo", "MemberNo", "OnCarNo")

HOST_LABEL_RE = re.compile(r"^(?!-)[a-z0-9-]{1,63}(?<!-)$")


@dataclass
class UrlValidationResult:
    url: str
    is_valid: bool
    is_duplicate: bool
    error: Optional[str] = None


def is_valid_host(host: str) -> bool:
    """An IP address or a dotted name of non-empty LDH labels."""
    try:
        ipaddress.ip_address(host)
        return True
    except ValueError:
        pass
    try:
        host = host.encode("idna").decode("ascii")
    except UnicodeError:
        return False
    labels = (host[:-1] if host.endswith(".") else host).split(".")
    if labels[-1].isdigit():  # numeric tail that is not a valid IPv4
        return False
    return all(HOST_LABEL_RE.match(label) for label in labels)


def is_absolute_url(url: str) -> bool:
    """True for a well-formed absolute http(s) URL."""
    if not url or url != url.strip():
        return False
    try:
        u = urlparse(url)
        u.port  # raises on a non-numeric or out-of-range port
    except ValueError:
        return False
    return u.scheme in ("http", "https") and bool(u.hostname) and is_valid_host(u.hostname)


def validate_url(url: str) -> Tuple[bool, Optional[str]]:
    """
    Check that a URL points at a supported listing detail page.

    Returns (is_valid, error_message).
    """
    try:
        u = urlparse(url.strip())
        host = u.hostname
    except ValueError:
        return (False, "Malformed URL")

    if u.scheme not in ("http", "https"):
        return (False, "Only HTTP or HTTPS URLs are allowed")
    if not host:
        return (False, "Malformed URL")
    if host not in ALLOWED_DOMAINS:
        return (False, f"Domain not allowed. Allowed domains: {', '.join(ALLOWED_DOMAINS)}")
    if u.path not in ALLOWED_PATHS:
        return (False, f"Path not allowed. Allowed paths: {', '.join(ALLOWED_PATHS)}")

    params = parse_qs(u.query, keep_blank_values=True)
    for name in REQUIRED_PARAMS:
        if name not in params:
            return (False, f"Missing required parameter: {name}")

    return (True, None)


def validate_urls_from_text(text: str) -> List[UrlValidationResult]:
    """Validate one URL per non-blank line, flagging case-insensitive duplicates."""
    lines = [line.strip() for line in (text or "").split("\n")]
    seen = set()
    results = []

    for url in lines:
        if not url:
            continue
        ok, err = validate_url(url)
        key = url.lower()
        dup = key in seen
        # only valid URLs claim a slot
        if ok and not dup:
            seen.add(key)

        if not ok:
            error = err or "Invalid URL"
        elif dup:
            error = "Duplicate URL"
        else:
            error = None

        results.append(UrlValidationResult(url=url, is_valid=ok, is_duplicate=dup, error=error))

    return results


def get_valid_urls(results: List[UrlValidationResult]) -> List[str]:
    """Valid, non-duplicate URLs in input order."""
    return [r.url for r in results if r.is_valid and not r.is_duplicate]
