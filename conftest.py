"""
Shared pytest fixtures: listing page markup in the vendor's template.
"""
import pytest


LISTING_URL = "https://www.truck-no1.co.kr/model/DetailView.asp?ShopNo=1&MemberNo=2&OnCarNo=1001"

SAMPLE_PAGE = """<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>트럭No1 - 매물 상세</title></head>
<body>
<div class="car-info">
  <p class="vname">현대 마이티</p>
  <p class="vnumber">서울80바1234</p>
  <p class="vcash">판매가격 <span class="red">3,550</span> 만원</p>
</div>
<div class="car-detail">
  <dl><dt>연식</dt><dd><strong class="number">2020</strong>년 03월</dd></dl>
  <dl><dt>주행거리</dt><dd><strong class="red number">152,000</strong> km</dd></dl>
  <dl><dt>연료</dt><dd>경유</dd></dl>
</div>
<div class="vcontent">
  <p><font><span><b><span>차명: 마이티 3.5톤 냉동탑</span></b></span></font></p>
  ▶ 추가장착 옵션 :: 냉동기, 후방카메라,, 네비게이션<br>
  ▶ 기타 :: 무사고
</div>
<div class="sumnail">
  <ul>
    <li><img src="/upload/car/1001_TH.jpg" onmouseover="changeImg('https://img.truck-no1.co.kr/upload/car/1001.jpg')"></li>
    <li><img src="/upload/car/1002_TH.jpg" onmouseover="changeImg('https://img.truck-no1.co.kr/upload/car/1002.jpg')"></li>
    <li><img src="/images/Blank_Photo_S.gif" onmouseover="changeImg('/images/Blank_Photo_S.gif')"></li>
    <li><img src="/upload/car/1001_TH.jpg" onmouseover="changeImg('https://img.truck-no1.co.kr/upload/car/1001.jpg')"></li>
  </ul>
  <img src="https://img.truck-no1.co.kr/upload/car/1003.jpg">
  <img src="https://img.truck-no1.co.kr/upload/car/1001.jpg">
</div>
</body>
</html>
"""

EMPTY_PAGE = """<!DOCTYPE html>
<html><body><div class="header">트럭No1</div><p>매물이 존재하지 않습니다.</p></body></html>
"""


@pytest.fixture
def sample_page():
    return SAMPLE_PAGE


@pytest.fixture
def empty_page():
    return EMPTY_PAGE


@pytest.fixture
def listing_url():
    return LISTING_URL
