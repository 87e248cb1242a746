"""リクエスト境界 — 入力検証とステータスコードへの対応付け.

各ハンドラは JSON 相当の dict を受け取り (ステータスコード, レスポンス body) を返す。
"""

from __future__ import annotations

import logging
import random

from listing_intel.config import DEFAULT_DOMAIN
from listing_intel.errors import ListingIntelError, ValidationError
from listing_intel.gap_analysis import perform_gap_analysis
from listing_intel.rank_scanner import find_rank
from listing_intel.scraper import parse_asin_list, scrape_product
from listing_intel.seo_score import score_listing_seo

logger = logging.getLogger(__name__)

Response = tuple[int, dict]


def _require(payload: dict, *names: str) -> None:
    missing = [n for n in names if not payload.get(n)]
    if missing:
        raise ValidationError(f"{', '.join(missing)} required")


def _error(status: int, message: str) -> Response:
    return status, {"error": message}


def handle_scrape(payload: dict, rng: random.Random | None = None) -> Response:
    try:
        _require(payload, "asin")
    except ValidationError as e:
        return _error(400, str(e))

    record = scrape_product(payload["asin"], payload.get("domain", DEFAULT_DOMAIN), rng=rng)
    if record.error:
        return _error(500, record.error)
    return 200, record.to_dict()


def handle_find_rank(
    payload: dict,
    rng: random.Random | None = None,
    **scan_options,
) -> Response:
    try:
        _require(payload, "asin", "keyword")
    except ValidationError as e:
        return _error(400, str(e))

    asin = payload["asin"]
    keyword = payload["keyword"]
    try:
        result = find_rank(
            asin, keyword, payload.get("domain", DEFAULT_DOMAIN), rng=rng, **scan_options
        )
    except ListingIntelError as e:
        logger.error("順位取得失敗: asin=%s, keyword=%s, error=%s", asin, keyword, e)
        return _error(500, str(e))

    return 200, {"asin": asin, "keyword": keyword, **result.to_dict(), "success": True}


def handle_gap_analysis(payload: dict, rng: random.Random | None = None) -> Response:
    """payload: {"user": ASIN, "competitors": [ASIN, ...] またはカンマ区切り文字列, "domain": 任意}."""
    try:
        _require(payload, "user", "competitors")
    except ValidationError as e:
        return _error(400, str(e))

    domain = payload.get("domain", DEFAULT_DOMAIN)
    user = scrape_product(payload["user"], domain, rng=rng)
    if user.error:
        return _error(500, user.error)

    competitor_asins = payload["competitors"]
    if isinstance(competitor_asins, str):
        competitor_asins = parse_asin_list(competitor_asins)

    competitors = []
    for asin in competitor_asins:
        record = scrape_product(asin, domain, rng=rng)
        if record.error:
            logger.warning("競合の取得に失敗したため除外: asin=%s, error=%s", asin, record.error)
            continue
        competitors.append(record)

    try:
        result = perform_gap_analysis(user, competitors, domain, rng=rng)
    except ValidationError as e:
        return _error(400, str(e))
    return 200, result.to_dict()


def handle_seo_score(payload: dict) -> Response:
    keywords = payload.get("keywords") or []
    if isinstance(keywords, str):
        keywords = [k.strip() for k in keywords.split(",") if k.strip()]

    analysis = score_listing_seo(
        payload.get("title", ""),
        list(payload.get("bullets") or []),
        payload.get("description", ""),
        keywords,
    )
    return 200, analysis.to_dict()
