"""
Export utilities: per-listing bundles (folder or ZIP) and tabular summaries.
"""
import re
import zipfile
from pathlib import Path
from typing import Awaitable, Callable, List, Optional

import pandas as pd

from .models import ListingRecord


FetchImage = Callable[[str], Awaitable[bytes]]

UNSAFE_NAME_RE = re.compile(r'[<>:"/\\|?*\x00-\x1f]')
EDGE_DOTS_RE = re.compile(r"^[ .]+|[ .]+$")

LISTING_TEXT_TEMPLATE = """{category_name} 매매 가격 시세
{amount_won}
생활/건강,공구,운반용품

{category_name} 매매 가격 시세



차종 :  {category_name}

차명 :  {display_name}

차량번호 :  {registration_number}

연식 :  {model_year}

주행거리 :  {odometer_reading}

기타사항 :  {options_text}




가격 :  {price_label}





화물차, 특장차를 전문으로 매매하는 오픈매장으로

충분한 상담을 통해 용도에 딱 맞는 차량을 권해드리고 있습니다.

최고가 매입, 매매 /전국 어디든 출장 매입 가능!!



언제든지 문의 주시면 최선을 다해 상담하겠습니다.
상담문의 010-4082-8945 트럭판매왕

{image_refs}"""


def image_file_name(index: int) -> str:
    """0 -> "K-001.jpg"."""
    return f"K-{index + 1:03d}.jpg"


def safe_folder_name(registration_number: str) -> str:
    """A single path component: no separators, no "." / ".." and never empty."""
    name = UNSAFE_NAME_RE.sub("_", registration_number)
    return EDGE_DOTS_RE.sub("_", name) or "_"


def listing_text_file_name(record: ListingRecord) -> str:
    return f"{safe_folder_name(record.registration_number)} 원고.txt"


def render_listing_text(record: ListingRecord) -> str:
    """Render the sales manuscript for one listing."""
    if record.images:
        image_refs = "\n".join(f"#사진:{image_file_name(i)}" for i in range(len(record.images)))
    else:
        image_refs = "이미지 없음"
    return LISTING_TEXT_TEMPLATE.format(
        category_name=record.category_name,
        display_name=record.display_name,
        registration_number=record.registration_number,
        model_year=record.model_year,
        odometer_reading=record.odometer_reading,
        options_text=record.options_text,
        price_label=record.price.label,
        amount_won=record.price.amount_won,
        image_refs=image_refs,
    )


async def _download_images(record: ListingRecord, fetch_image: Optional[FetchImage], logger=None):
    """Yield (file_name, payload) for every image that downloads."""
    if fetch_image is None:
        return
    for i, url in enumerate(record.images):
        try:
            payload = await fetch_image(url)
        except Exception as e:
            if logger:
                logger.warning(f">>> Image download failed: {url} ({e})")
            continue
        yield image_file_name(i), payload


async def write_listing_folder(
    record: ListingRecord,
    root: str,
    fetch_image: Optional[FetchImage] = None,
    logger=None
) -> Optional[Path]:
    """Write `<root>/<registration>/` with the manuscript and images. Returns the folder."""
    if record.error is not None:
        return None
    folder = Path(root) / safe_folder_name(record.registration_number)
    folder.mkdir(parents=True, exist_ok=True)
    (folder / listing_text_file_name(record)).write_text(render_listing_text(record), encoding="utf-8")

    saved = 0
    async for name, payload in _download_images(record, fetch_image, logger):
        (folder / name).write_bytes(payload)
        saved += 1

    if logger:
        logger.info(f">>> Saved {record.registration_number}: {saved}/{len(record.images)} images -> {folder}")
    return folder


async def write_zip_bundle(
    records: List[ListingRecord],
    out_path: str,
    fetch_image: Optional[FetchImage] = None,
    logger=None
) -> int:
    """Write every successful record into one ZIP, a folder per listing. Returns listings written."""
    written = 0
    with zipfile.ZipFile(out_path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for record in records:
            if record.error is not None:
                continue
            folder = safe_folder_name(record.registration_number)
            zf.writestr(f"{folder}/{listing_text_file_name(record)}", render_listing_text(record))
            async for name, payload in _download_images(record, fetch_image, logger):
                zf.writestr(f"{folder}/{name}", payload)
            written += 1

    if logger:
        logger.info(f">>> Saved {written} listings to {out_path}")
    return written


def records_to_frame(records: List[ListingRecord]) -> pd.DataFrame:
    rows = []
    for x in records:
        rows.append({
            "source_url": x.source_url,
            "category_name": x.category_name,
            "display_name": x.display_name,
            "registration_number": x.registration_number,
            "price_manwon": x.price.amount_ten_thousand_won,
            "price_won": x.price.amount_won,
            "price_label": x.price.label,
            "price_compact": x.price.compact_label,
            "model_year": x.model_year,
            "odometer_reading": x.odometer_reading,
            "options_text": x.options_text,
            "image_count": len(x.images),
            "img_urls": "|".join(x.images),
            "error": x.error or "",
            "error_kind": x.error_kind or "",
        })
    return pd.DataFrame(rows)


def save_output_rows(records: List[ListingRecord], out_path: str, logger=None):
    """Save records to CSV or Excel file."""
    df = records_to_frame(records)
    if out_path.lower().endswith(".xlsx"):
        df.to_excel(out_path, index=False)
    else:
        df.to_csv(out_path, index=False)

    if logger:
        logger.info(f">>> Saved {len(df)} rows to {out_path}")
    else:
        print(f">>> Saved {len(df)} rows to {out_path}")
