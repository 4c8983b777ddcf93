"""
Field extraction rules for truck listing detail pages.

Each field has its own rule function with a sentinel default, so a markup
change on the vendor page only breaks (and only needs fixing in) one rule.
"""
import re
from typing import List, Optional
from urllib.parse import urljoin

from .document import Node, ParsedDocument
from .errors import ExtractionError
from .models import ListingFields, Price
from .utils import compact_price_label, format_price_label, parse_leading_int


# Selectors
CATEGORY_SEL = "p.vname"
REGISTRATION_SEL = "p.vnumber"
PRICE_SEL = "p.vcash > span.red"
DETAIL_ENTRY_SEL = ".car-detail dl dd"
YEAR_SEL = "strong.number"
ODOMETER_SEL = "strong.red.number"
CONTENT_SEL = ".vcontent"
NAME_SPAN_SEL = ".vcontent p font span b span"
THUMBNAIL_HOVER_SEL = '.sumnail ul li img[onmouseover*="changeImg"]'
THUMBNAIL_IMG_SEL = ".sumnail img"

# Sentinels
CATEGORY_NOT_FOUND = "차명 정보 없음"
REGISTRATION_NOT_FOUND = "차량번호 정보 없음"
YEAR_NOT_FOUND = "연식 정보 없음"
ODOMETER_NOT_FOUND = "주행거리 정보 없음"
OPTIONS_NOT_FOUND = "기타사항 정보 없음"

NAME_MARKER = "차명:"
ODOMETER_UNIT = "km"
PLACEHOLDER_MARKER = "blank"
THUMBNAIL_SUFFIX_MARKER = "_th"

YEAR_RE = re.compile(r"^\d{4}$")
CHANGE_IMG_RE = re.compile(r"""changeImg\(['"](.*?)['"]""")
OPTIONS_RE = re.compile(r"▶\s*추가장착\s*옵션\s*::\s*([^<]*?)(?=<br|\Z)", re.I)
COMMA_RUN_RE = re.compile(r"\s*,[\s,]*")


def _node_text(node: Optional[Node]) -> str:
    return node.text().strip() if node is not None else ""


def extract_category_name(doc: ParsedDocument) -> str:
    return _node_text(doc.select_first(CATEGORY_SEL)) or CATEGORY_NOT_FOUND


def extract_registration_number(doc: ParsedDocument) -> str:
    return _node_text(doc.select_first(REGISTRATION_SEL)) or REGISTRATION_NOT_FOUND


def build_price(amount: int) -> Price:
    """Derive every price representation from the 만원 amount."""
    return Price(
        amount_ten_thousand_won=amount,
        amount_won=amount * 10000,
        label=format_price_label(amount),
        compact_label=compact_price_label(amount),
    )


def extract_price(doc: ParsedDocument) -> Price:
    return build_price(parse_leading_int(_node_text(doc.select_first(PRICE_SEL))))


def extract_model_year(doc: ParsedDocument) -> str:
    """Four-digit year from the first detail entry."""
    entries = doc.select_all(DETAIL_ENTRY_SEL)
    if not entries:
        return YEAR_NOT_FOUND
    year = _node_text(entries[0].select_first(YEAR_SEL))
    if YEAR_RE.match(year):
        return year
    return YEAR_NOT_FOUND


def extract_odometer_reading(doc: ParsedDocument) -> str:
    """First detail entry with a highlighted number and a km unit."""
    for entry in doc.select_all(DETAIL_ENTRY_SEL):
        value = "".join(n.text() for n in entry.select_all(ODOMETER_SEL)).strip()
        if value and ODOMETER_UNIT in entry.text():
            return value + ODOMETER_UNIT
    return ODOMETER_NOT_FOUND


def extract_display_name(doc: ParsedDocument, category_name: str) -> str:
    """Name from the "차명:" span in the description, else the category."""
    for span in doc.select_all(NAME_SPAN_SEL):
        text = span.text().strip()
        if text.startswith(NAME_MARKER):
            name = text[len(NAME_MARKER):].strip()
            if name:
                return name
    return category_name


def extract_options_text(doc: ParsedDocument) -> str:
    """
    Extra-equipment list from the free-text description.

    The description holds a line such as
    "▶ 추가장착 옵션 :: 냉동기, 후방카메라<br>"; the text up to the next
    <br> (or the end of the block) is captured and its comma runs turned
    into " / " separators.
    """
    content = doc.select_first(CONTENT_SEL)
    if content is None:
        return OPTIONS_NOT_FOUND
    m = OPTIONS_RE.search(content.html())
    if not m:
        return OPTIONS_NOT_FOUND
    captured = m.group(1).strip()
    if not captured:
        return OPTIONS_NOT_FOUND
    return COMMA_RUN_RE.sub(" / ", captured).strip()


def is_placeholder_image(url: str) -> bool:
    return PLACEHOLDER_MARKER in url.lower()


def extract_images(doc: ParsedDocument) -> List[str]:
    """
    Full-size image URLs in discovery order, without duplicates.

    Primary source is the changeImg(...) hover handler on each thumbnail;
    plain <img src> inside the thumbnail block is the fallback, minus
    thumbnail-sized variants.
    """
    found: List[str] = []

    def add(url: str):
        if doc.base_url:
            url = urljoin(doc.base_url, url)
        if url not in found:
            found.append(url)

    for img in doc.select_all(THUMBNAIL_HOVER_SEL):
        handler = img.attr("onmouseover") or ""
        m = CHANGE_IMG_RE.search(handler)
        if not m or not m.group(1):
            continue
        url = m.group(1).strip()
        if url and not is_placeholder_image(url):
            add(url)

    for img in doc.select_all(THUMBNAIL_IMG_SEL):
        src = (img.attr("src") or "").strip()
        if not src:
            continue
        if THUMBNAIL_SUFFIX_MARKER in src.lower() or is_placeholder_image(src):
            continue
        add(src)

    return found


def extract_listing(doc: ParsedDocument) -> ListingFields:
    """
    Map one listing page to its fields.

    Missing data yields sentinel strings; only an unexpected failure inside
    a rule raises, and it is re-raised as ExtractionError.
    """
    try:
        category_name = extract_category_name(doc)
        return ListingFields(
            category_name=category_name,
            display_name=extract_display_name(doc, category_name),
            registration_number=extract_registration_number(doc),
            price=extract_price(doc),
            model_year=extract_model_year(doc),
            odometer_reading=extract_odometer_reading(doc),
            options_text=extract_options_text(doc),
            images=tuple(extract_images(doc)),
        )
    except ExtractionError:
        raise
    except Exception as e:
        raise ExtractionError(f"Parsing failed: {e}") from e
