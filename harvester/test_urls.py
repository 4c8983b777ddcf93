#!/usr/bin/env python3
"""
Tests for listing URL validation.
"""
import pytest

from harvester.urls import get_valid_urls, is_absolute_url, validate_url, validate_urls_from_text


VALID = "https://www.truck-no1.co.kr/model/DetailView.asp?ShopNo=30195&MemberNo=56934&OnCarNo=2025100045"


def test_valid_listing_url():
    assert validate_url(VALID) == (True, None)
    assert validate_url(VALID.replace("https", "http", 1)) == (True, None)


@pytest.mark.parametrize("url, fragment", [
    ("ftp://www.truck-no1.co.kr/model/DetailView.asp?ShopNo=1&MemberNo=2&OnCarNo=3", "HTTP"),
    ("https://example.com/model/DetailView.asp?ShopNo=1&MemberNo=2&OnCarNo=3", "Domain"),
    ("https://www.truck-no1.co.kr/model/List.asp?ShopNo=1&MemberNo=2&OnCarNo=3", "Path"),
    ("https://www.truck-no1.co.kr/model/DetailView.asp?ShopNo=1&MemberNo=2", "OnCarNo"),
    ("not a url", "HTTP"),
])
def test_invalid_listing_urls(url, fragment):
    ok, err = validate_url(url)
    assert not ok
    assert fragment in err


def test_validate_urls_from_text_flags_duplicates():
    text = "\n".join([
        VALID,
        "",
        "https://example.com/x",
        "   ",
        "  " + VALID,
        VALID.replace("www.truck-no1.co.kr", "WWW.TRUCK-NO1.CO.KR"),
    ])
    results = validate_urls_from_text(text)

    assert len(results) == 4
    assert results[0].is_valid and not results[0].is_duplicate and results[0].error is None
    assert results[1].is_valid is False
    assert results[2].url == VALID
    assert results[2].is_duplicate
    assert results[2].error == "Duplicate URL"
    assert results[3].is_valid and results[3].is_duplicate
    assert get_valid_urls(results) == [VALID]


def test_validate_urls_from_text_empty():
    assert validate_urls_from_text("") == []
    assert get_valid_urls([]) == []


@pytest.mark.parametrize("url, expected", [
    ("https://example.com/a", True),
    ("http://localhost:8000/x?y=1", True),
    ("example.com/a", False),
    ("/model/DetailView.asp", False),
    ("mailto:a@b.c", False),
    (" https://example.com", False),
    ("", False),
    ("https://exa mple.com/x", False),
    ("http://host:99999/", False),
    ("http://host:80a/", False),
    ("https://a..b/", False),
    ("http://-/", False),
    ("http://1.2.3.999/", False),
    ("http://127.0.0.1:8080/x", True),
    ("http://[::1]/", True),
    ("https://www.truck-no1.co.kr./", True),
])
def test_is_absolute_url(url, expected):
    assert is_absolute_url(url) is expected


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
