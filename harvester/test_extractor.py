#!/usr/bin/env python3
"""
Tests for listing page field extraction.
"""
import pytest

from harvester.document import parse_document
from harvester.errors import ExtractionError
from harvester.extractor import (
    CATEGORY_NOT_FOUND,
    ODOMETER_NOT_FOUND,
    OPTIONS_NOT_FOUND,
    REGISTRATION_NOT_FOUND,
    YEAR_NOT_FOUND,
    extract_images,
    extract_listing,
    extract_model_year,
    extract_odometer_reading,
    extract_options_text,
)


def test_full_listing(sample_page, listing_url):
    """Test that every field is read from a complete page."""
    fields = extract_listing(parse_document(sample_page, base_url=listing_url))

    assert fields.category_name == "현대 마이티"
    assert fields.display_name == "마이티 3.5톤 냉동탑"
    assert fields.registration_number == "서울80바1234"
    assert fields.price.amount_ten_thousand_won == 3550
    assert fields.price.amount_won == 35_500_000
    assert fields.price.label == "3,550만원"
    assert fields.price.compact_label == "3.6천만"
    assert fields.model_year == "2020"
    assert fields.odometer_reading == "152,000km"
    assert fields.options_text == "냉동기 / 후방카메라 / 네비게이션"
    assert fields.images == (
        "https://img.truck-no1.co.kr/upload/car/1001.jpg",
        "https://img.truck-no1.co.kr/upload/car/1002.jpg",
        "https://img.truck-no1.co.kr/upload/car/1003.jpg",
    )


def test_missing_fields_use_sentinels(empty_page):
    """Test that absent data yields sentinels rather than errors."""
    fields = extract_listing(parse_document(empty_page))

    assert fields.category_name == CATEGORY_NOT_FOUND
    assert fields.display_name == CATEGORY_NOT_FOUND
    assert fields.registration_number == REGISTRATION_NOT_FOUND
    assert fields.price.amount_ten_thousand_won == 0
    assert fields.price.amount_won == 0
    assert fields.price.label == "0만원"
    assert fields.price.compact_label == "0만원"
    assert fields.model_year == YEAR_NOT_FOUND
    assert fields.odometer_reading == ODOMETER_NOT_FOUND
    assert fields.options_text == OPTIONS_NOT_FOUND
    assert fields.images == ()


def test_extraction_is_idempotent(sample_page, listing_url):
    doc = parse_document(sample_page, base_url=listing_url)
    assert extract_listing(doc) == extract_listing(doc)


def test_display_name_falls_back_to_category():
    doc = parse_document('<p class="vname">기아 봉고3</p><div class="vcontent">설명 없음</div>')
    fields = extract_listing(doc)
    assert fields.display_name == "기아 봉고3"


def test_unparseable_price_is_zero():
    doc = parse_document('<p class="vcash"><span class="red">상담</span></p>')
    assert extract_listing(doc).price.amount_won == 0


def test_price_with_trailing_unit():
    doc = parse_document('<p class="vcash"><span class="red"> 1,200만 </span><span class="red">9</span></p>')
    price = extract_listing(doc).price
    assert price.amount_ten_thousand_won == 1200
    assert price.compact_label == "1.2천만"


@pytest.mark.parametrize("year_html, expected", [
    ('<strong class="number">2018</strong>', "2018"),
    ('<strong class="number">2018년</strong>', YEAR_NOT_FOUND),
    ('<strong class="number">18</strong>', YEAR_NOT_FOUND),
    ('2018', YEAR_NOT_FOUND),
])
def test_model_year(year_html, expected):
    doc = parse_document(f'<div class="car-detail"><dl><dd>{year_html}</dd></dl></div>')
    assert extract_model_year(doc) == expected


def test_odometer_requires_km_unit():
    html = """
    <div class="car-detail">
      <dl><dd><strong class="red number">3</strong> 톤</dd></dl>
      <dl><dd><strong class="red number">98,500</strong> km</dd></dl>
      <dl><dd><strong class="red number">120,000</strong> km</dd></dl>
    </div>
    """
    assert extract_odometer_reading(parse_document(html)) == "98,500km"


def test_odometer_joins_split_numbers():
    html = """
    <div class="car-detail">
      <dl><dd><strong class="red number">152</strong><strong class="red number">,000</strong> km</dd></dl>
    </div>
    """
    assert extract_odometer_reading(parse_document(html)) == "152,000km"


def test_odometer_ignores_plain_numbers():
    html = '<div class="car-detail"><dl><dd><strong class="number">98,500</strong> km</dd></dl></div>'
    assert extract_odometer_reading(parse_document(html)) == ODOMETER_NOT_FOUND


@pytest.mark.parametrize("content, expected", [
    ("▶ 추가장착 옵션 :: 윙바디,리프트<br>다음 줄", "윙바디 / 리프트"),
    ("▶추가장착옵션::적재함 연장 ,  , 타프", "적재함 연장 / 타프"),
    ("▶ 추가장착 옵션 ::   <br>", OPTIONS_NOT_FOUND),
    ("추가장착 옵션 없음", OPTIONS_NOT_FOUND),
])
def test_options_text(content, expected):
    doc = parse_document(f'<div class="vcontent">{content}</div>')
    assert extract_options_text(doc) == expected


def test_relative_images_are_resolved(listing_url):
    html = """
    <div class="sumnail"><ul>
      <li><img src="/p/1_TH.jpg" onmouseover="changeImg(&quot;/p/1.jpg&quot;)"></li>
    </ul><img src="/p/2.jpg"></div>
    """
    images = extract_images(parse_document(html, base_url=listing_url))
    assert images == [
        "https://www.truck-no1.co.kr/p/1.jpg",
        "https://www.truck-no1.co.kr/p/2.jpg",
    ]


@pytest.mark.parametrize("html", [
    '<div class="sumnail"><img src="/img/BLANK.gif"><img src="/img/a.jpg"><img src="/img/a.jpg"></div>',
    """<div class="sumnail"><ul>
         <li><img onmouseover="changeImg('/img/blank_photo.gif')"></li>
         <li><img onmouseover="changeImg('/img/a.jpg')"></li>
       </ul><img src="/img/a.jpg"><img src="/img/a_th.jpg"></div>""",
    '<div class="sumnail"></div>',
])
def test_images_unique_and_without_placeholders(html):
    images = extract_images(parse_document(html))
    assert len(images) == len(set(images))
    assert not any("blank" in url.lower() for url in images)
    assert not any("_th" in url.lower() for url in images)


class BrokenDocument:
    base_url = None

    def select_first(self, selector):
        raise RuntimeError("selector engine exploded")

    def select_all(self, selector):
        raise RuntimeError("selector engine exploded")


def test_unexpected_failure_becomes_extraction_error():
    with pytest.raises(ExtractionError) as exc_info:
        extract_listing(BrokenDocument())
    assert "selector engine exploded" in str(exc_info.value)


if __name__ == "__main__":
    # Run pytest programmatically
    pytest.main([__file__, "-v"])
