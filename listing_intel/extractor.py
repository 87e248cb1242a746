"""商品ページ HTML からのフィールド抽出モジュール.

フィールドごとに抽出戦略（セレクタ/パターン）のリストを持ち、先頭から順に
適用して最初に空でない結果を採用する。全戦略が外れた場合は "N/A" 等の
デフォルト値を使う。
"""

from __future__ import annotations

import logging
import re
from typing import Callable

from bs4 import BeautifulSoup

from listing_intel.config import (
    CATEGORY_MAX_LENGTH,
    DESCRIPTION_MAX_LENGTH,
    NOT_AVAILABLE,
)
from listing_intel.errors import ParseError
from listing_intel.models import ProductRecord

logger = logging.getLogger(__name__)

Strategy = Callable[[BeautifulSoup], object]

_PRICE_STRIP_PATTERN = re.compile(r"[^\d,.]")
_BSR_PATTERN = re.compile(r"#([0-9,]+)\s+in", re.IGNORECASE)
_RATING_PATTERN = re.compile(r"\d(?:\.\d)?\s+out of\s+5", re.IGNORECASE)
_SOLD_BY_PATTERN = re.compile(r"Sold by\s+", re.IGNORECASE)
_FULFILLED_PATTERN = re.compile(r"\s+and Fulfilled by Amazon\.?", re.IGNORECASE)
_BREADCRUMB_SEP_PATTERN = re.compile(r"\s*[>›]\s*")
_WHITESPACE_PATTERN = re.compile(r"\s+")
_NUMBER_PATTERN = re.compile(r"\d[\d,.]*")
_DECIMAL_TAIL_PATTERN = re.compile(r"^(\d[\d,.]*?)[,.](\d{1,2})$")
_SEPARATOR_PATTERN = re.compile(r"[,.]")


# ---------------------------------------------------------------------------
# 戦略ファクトリ
# ---------------------------------------------------------------------------

def text_of(selector: str) -> Strategy:
    """セレクタに一致する最初の要素のテキスト."""

    def strategy(soup: BeautifulSoup) -> str:
        el = soup.select_one(selector)
        return el.get_text(" ", strip=True) if el else ""

    return strategy


def attr_of(selector: str, attr: str) -> Strategy:
    """セレクタに一致する最初の要素の属性値."""

    def strategy(soup: BeautifulSoup) -> str:
        el = soup.select_one(selector)
        if el is None:
            return ""
        value = el.get(attr) or ""
        return value.strip() if isinstance(value, str) else ""

    return strategy


def count_of(selector: str) -> Strategy:
    def strategy(soup: BeautifulSoup) -> int:
        return len(soup.select(selector))

    return strategy


def texts_of(selector: str) -> Strategy:
    """一致する全要素のテキストを文書順で返す. 空文字は除外."""

    def strategy(soup: BeautifulSoup) -> list[str]:
        texts = (el.get_text(" ", strip=True) for el in soup.select(selector))
        return [t for t in texts if t]

    return strategy


def present(*selectors: str) -> Strategy:
    def strategy(soup: BeautifulSoup) -> bool:
        return any(soup.select_one(s) is not None for s in selectors)

    return strategy


def rating_text(selector: str) -> Strategy:
    """"4.3 out of 5 stars" 形式の評価テキスト."""

    def strategy(soup: BeautifulSoup) -> str:
        el = soup.select_one(selector)
        if el is None:
            return ""
        text = el.get_text(" ", strip=True)
        if not _RATING_PATTERN.search(text):
            raise ParseError(f"評価テキストの形式が不正: {text!r}")
        return text

    return strategy


def _store_link(soup: BeautifulSoup) -> bool:
    el = soup.select_one("#bylineInfo")
    href = el.get("href", "") if el else ""
    return "/stores/" in href or "/node/" in href


def _bsr(soup: BeautifulSoup) -> str:
    m = _BSR_PATTERN.search(soup.get_text(" "))
    return m.group(1) if m else ""


# ---------------------------------------------------------------------------
# フィールド別の戦略チェーン
# ---------------------------------------------------------------------------

FIELD_STRATEGIES: dict[str, list[Strategy]] = {
    "title": [text_of("#productTitle"), text_of("#title")],
    "price": [
        text_of(".a-price-whole"),
        text_of("#priceblock_ourprice"),
        text_of(".a-price .a-offscreen"),
    ],
    "mrp": [
        text_of(".a-text-strike"),
        text_of("#listPrice"),
        text_of(".a-text-price span.a-offscreen"),
    ],
    "sold_by": [text_of("#merchant-info"), text_of("#sellerProfileTriggerId")],
    "category": [
        text_of("#wayfinding-breadcrumbs_feature_div"),
        text_of(".a-breadcrumb"),
    ],
    "rating": [
        attr_of("#acrPopover", "title"),
        attr_of(".a-icon-star", "title"),
        rating_text(".a-icon-alt"),
    ],
    "review_count": [
        text_of("#acrCustomerReviewText"),
        text_of(".a-size-small .a-link-normal"),
    ],
    "image_count": [count_of("#altImages li.item"), count_of(".imageThumbnail")],
    "bullets": [
        texts_of("#feature-bullets ul li span.a-list-item"),
        texts_of("#feature-bullets li"),
    ],
    "description": [text_of("#productDescription"), text_of(".aplus-v2")],
    "has_a_plus": [present(".aplus-v2", "#aplus", ".aplus-module")],
    "has_store": [_store_link, present(".s-brand-store-banner")],
    "bsr": [_bsr],
}


def run_chain(soup: BeautifulSoup, strategies: list[Strategy], default):
    """戦略を順に適用し、最初に空でない結果を返す."""
    for strategy in strategies:
        try:
            value = strategy(soup)
        except ParseError as e:
            logger.debug("抽出戦略スキップ: %s", e)
            continue
        if value:
            return value
    return default


# ---------------------------------------------------------------------------
# 正規化
# ---------------------------------------------------------------------------

def normalize_price(raw: str | None) -> str:
    """通貨記号や空白を除去し、数字と区切り文字のみ残す.

    例: "₹1,299." -> "1,299"
    """
    if not raw or raw == NOT_AVAILABLE:
        return NOT_AVAILABLE
    cleaned = _PRICE_STRIP_PATTERN.sub("", raw).strip(",.")
    return cleaned or NOT_AVAILABLE


def parse_number(value: str | None) -> float | None:
    """正規化済み価格などの文字列を数値に変換する. 変換不可なら None.

    最後の "," / "." の後ろが 1〜2 桁なら小数点、それ以外は桁区切りとみなす。
    例: "1,299" -> 1299, "1.299,00" -> 1299.0, "4,5 von 5" -> 4.5
    """
    if not value or value == NOT_AVAILABLE:
        return None
    m = _NUMBER_PATTERN.search(value)
    if not m:
        return None
    number = m.group(0).rstrip(",.")
    decimal = _DECIMAL_TAIL_PATTERN.match(number)
    if decimal:
        integer = _SEPARATOR_PATTERN.sub("", decimal.group(1))
        return float(f"{integer}.{decimal.group(2)}")
    return float(_SEPARATOR_PATTERN.sub("", number))


def clean_seller(raw: str) -> str:
    seller = _SOLD_BY_PATTERN.sub("", raw)
    seller = _FULFILLED_PATTERN.sub("", seller)
    return _WHITESPACE_PATTERN.sub(" ", seller).strip()


def clean_category(raw: str) -> str:
    category = _WHITESPACE_PATTERN.sub(" ", raw).strip()
    category = _BREADCRUMB_SEP_PATTERN.sub(" > ", category)
    if len(category) > CATEGORY_MAX_LENGTH:
        return category[:CATEGORY_MAX_LENGTH] + "..."
    return category


# ---------------------------------------------------------------------------
# 抽出本体
# ---------------------------------------------------------------------------

def extract_product(html: str, asin: str, url: str) -> ProductRecord:
    """商品ページ HTML から ProductRecord を組み立てる."""
    soup = BeautifulSoup(html, "html.parser")

    def field(name: str, default=NOT_AVAILABLE):
        return run_chain(soup, FIELD_STRATEGIES[name], default)

    title = field("title")
    if title == NOT_AVAILABLE:
        logger.warning("タイトル抽出失敗（全戦略不一致）: asin=%s", asin)

    sold_by = field("sold_by")
    if sold_by != NOT_AVAILABLE:
        sold_by = clean_seller(sold_by) or NOT_AVAILABLE

    category = field("category")
    if category != NOT_AVAILABLE:
        category = clean_category(category)

    return ProductRecord(
        asin=asin,
        url=url,
        title=title,
        price=normalize_price(field("price")),
        mrp=normalize_price(field("mrp")),
        sold_by=sold_by,
        category=category,
        rating=field("rating"),
        review_count=field("review_count"),
        image_count=field("image_count", 0),
        bsr=field("bsr"),
        description=field("description")[:DESCRIPTION_MAX_LENGTH],
        bullets=tuple(field("bullets", [])),
        has_a_plus=field("has_a_plus", False),
        has_store=field("has_store", False),
    )
