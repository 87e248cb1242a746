"""キーワード検索順位スキャンモジュール.

検索結果ページを 1 ページ目から順番に取得し、対象 ASIN の位置を探す。
オーガニック順位のカウンタはページをまたいで累積するため、ページ取得は
必ず逐次で行う。
"""

from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass, replace

from bs4 import BeautifulSoup

from listing_intel.config import DEFAULT_DOMAIN, MAX_SEARCH_PAGES
from listing_intel.errors import ListingIntelError
from listing_intel.extractor import normalize_price
from listing_intel.fetcher import build_headers, fetch_html, search_url, wait_interval
from listing_intel.models import RankResult, SearchNode

logger = logging.getLogger(__name__)

_SPONSORED_SELECTOR = ".s-sponsored-label, .puis-sponsored-label-text"
SPONSORED_RANK = 1


@dataclass(frozen=True)
class ScanState:
    """ページ走査の累積状態."""

    page: int = 0
    organic_count: int = 0


def parse_search_page(html: str) -> tuple[list[SearchNode], bool]:
    """検索結果 HTML から商品ノード（文書順）と次ページ有無を返す."""
    soup = BeautifulSoup(html, "html.parser")

    nodes: list[SearchNode] = []
    for el in soup.select("[data-asin]"):
        asin = (el.get("data-asin") or "").strip()
        if not asin:
            continue
        price_el = el.select_one(".a-price-whole")
        nodes.append(SearchNode(
            asin=asin,
            is_sponsored=el.select_one(_SPONSORED_SELECTOR) is not None,
            price=normalize_price(price_el.get_text(strip=True) if price_el else None),
        ))

    # 1 ページ目の「前へ」も disabled になるため、「次へ」要素自体で判定する
    next_el = soup.select_one(".s-pagination-next")
    has_next = next_el is not None and "s-pagination-disabled" not in next_el.get("class", [])
    return nodes, has_next


def scan_page(
    nodes: list[SearchNode], asin: str, state: ScanState
) -> tuple[RankResult | None, ScanState]:
    """1 ページ分のノードを走査する.

    Returns:
        (見つかった場合の RankResult または None, 更新後の累積状態)
    """
    target = asin.upper()
    organic_count = state.organic_count

    for node in nodes:
        if not node.is_sponsored:
            organic_count += 1

        if node.asin.upper() == target:
            if node.is_sponsored:
                result = RankResult(
                    sponsored_rank=SPONSORED_RANK,
                    page=state.page,
                    price=node.price,
                    status="Sponsored",
                )
            else:
                result = RankResult(
                    organic_rank=organic_count,
                    page=state.page,
                    price=node.price,
                    status="Organic",
                )
            return result, replace(state, organic_count=organic_count)

    return None, replace(state, organic_count=organic_count)


def find_rank(
    asin: str,
    keyword: str,
    domain: str = DEFAULT_DOMAIN,
    max_pages: int = MAX_SEARCH_PAGES,
    rng: random.Random | None = None,
    sleep=time.sleep,
) -> RankResult:
    """キーワード検索結果における ASIN の順位を返す.

    2 ページ目以降の取得・解析失敗はそこで走査を打ち切り、圏外として扱う。

    Raises:
        ListingIntelError: 1 ページ目の取得に失敗した場合
    """
    rng = rng or random.Random()
    max_pages = max(1, min(max_pages, MAX_SEARCH_PAGES))
    headers = build_headers(rng)
    state = ScanState()

    for page in range(1, max_pages + 1):
        if page > 1:
            wait_interval(rng, sleep)

        url = search_url(keyword, page, domain)
        try:
            html = fetch_html(url, headers=headers, target="search results")
        except ListingIntelError as e:
            if page == 1:
                raise
            logger.warning("検索ページ取得失敗のため打ち切り: page=%d, error=%s", page, e)
            break

        try:
            nodes, has_next = parse_search_page(html)
        except Exception:
            if page == 1:
                raise
            logger.exception("検索ページ解析失敗のため打ち切り: page=%d", page)
            break

        logger.info("検索中: keyword=%s, page=%d, 商品 %d 件", keyword, page, len(nodes))

        result, state = scan_page(nodes, asin, replace(state, page=page))
        if result is not None:
            logger.info(
                "  %s → %s (page=%d, rank=%s)",
                asin, result.status, page, result.organic_rank or result.sponsored_rank,
            )
            return result

        if not has_next:
            break

    logger.info("  %s → 圏外 (keyword=%s)", asin, keyword)
    return RankResult(status="Not Found")
