"""商品ページのスクレイピングモジュール.

scrape_product は例外を外に出さない。失敗はすべて error 付きの
ProductRecord（他フィールドはデフォルト値）として返す。
"""

from __future__ import annotations

import logging
import random
import re
from typing import Callable, Iterable

from listing_intel.config import DEFAULT_DOMAIN
from listing_intel.errors import ListingIntelError
from listing_intel.extractor import extract_product
from listing_intel.fetcher import fetch_html, product_url
from listing_intel.models import ProductRecord

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, ProductRecord], None]

_ASIN_SPLIT_PATTERN = re.compile(r"[\s,]+")
_MIN_ASIN_LENGTH = 10


def scrape_product(
    asin: str,
    domain: str = DEFAULT_DOMAIN,
    rng: random.Random | None = None,
) -> ProductRecord:
    """商品ページを取得して ProductRecord を返す."""
    url = product_url(asin, domain)

    try:
        html = fetch_html(url, rng=rng, target="product page")
        record = extract_product(html, asin, url)
    except ListingIntelError as e:
        logger.error("スクレイピング失敗: asin=%s, error=%s", asin, e)
        return ProductRecord.failed(asin, url, str(e))
    except Exception as e:  # HTML パース中の想定外エラーも境界で捕捉する
        logger.exception("スクレイピング中の想定外エラー: asin=%s", asin)
        return ProductRecord.failed(asin, url, str(e) or "Unknown error")

    logger.info("取得完了: asin=%s, title=%.40s", asin, record.title)
    return record


def scrape_products(
    asins: Iterable[str],
    domain: str = DEFAULT_DOMAIN,
    on_progress: ProgressCallback | None = None,
    rng: random.Random | None = None,
) -> list[ProductRecord]:
    """複数 ASIN を1件ずつ順番に取得する.

    1件ごとに on_progress(完了数, 総数, レコード) を呼ぶ。失敗した ASIN は
    error 付きレコードとして結果に含め、バッチは中断しない。
    """
    asins = list(asins)
    total = len(asins)
    records: list[ProductRecord] = []

    for i, asin in enumerate(asins, start=1):
        record = scrape_product(asin, domain, rng=rng)
        records.append(record)
        if on_progress is not None:
            on_progress(i, total, record)

    failed = sum(1 for r in records if r.error)
    logger.info("一括取得完了: %d 件中 %d 件失敗", total, failed)
    return records


def parse_asin_list(text: str) -> list[str]:
    """空白・カンマ区切りの入力から ASIN を取り出す.

    10 文字未満のトークンは除外し、大文字化して出現順に重複排除する。
    """
    seen: set[str] = set()
    asins: list[str] = []
    for token in _ASIN_SPLIT_PATTERN.split(text):
        token = token.strip().upper()
        if len(token) < _MIN_ASIN_LENGTH or token in seen:
            continue
        seen.add(token)
        asins.append(token)
    return asins
