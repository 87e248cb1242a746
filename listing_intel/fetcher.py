"""HTTP 取得モジュール.

ブラウザ風ヘッダ（User-Agent はプールからランダム選択）で GET し、
HTML 文字列を返す。失敗は種類ごとの例外に分類する。
"""

from __future__ import annotations

import logging
import random
import time
from urllib.parse import quote_plus

import requests

from listing_intel.config import (
    BASE_HEADERS,
    PRODUCT_URL_TEMPLATE,
    REQUEST_INTERVAL_MAX,
    REQUEST_INTERVAL_MIN,
    REQUEST_TIMEOUT,
    SEARCH_URL_TEMPLATE,
    USER_AGENTS,
)
from listing_intel.errors import BlockedError, HttpStatusError, NetworkError

logger = logging.getLogger(__name__)


def product_url(asin: str, domain: str) -> str:
    return PRODUCT_URL_TEMPLATE.format(domain=domain, asin=asin)


def search_url(keyword: str, page: int, domain: str) -> str:
    return SEARCH_URL_TEMPLATE.format(
        domain=domain, keyword=quote_plus(keyword), page=page
    )


def build_headers(rng: random.Random | None = None) -> dict[str, str]:
    """User-Agent をプールから一様ランダムに選び、固定ヘッダと合わせて返す."""
    rng = rng or random.Random()
    return {"User-Agent": rng.choice(USER_AGENTS), **BASE_HEADERS}


def fetch_html(
    url: str,
    headers: dict[str, str] | None = None,
    rng: random.Random | None = None,
    target: str = "page",
) -> str:
    """URL の HTML を取得する. target はエラーメッセージ中の取得対象名.

    Raises:
        BlockedError: HTTP 503
        HttpStatusError: その他の非 2xx
        NetworkError: 通信エラー
    """
    headers = headers or build_headers(rng)

    try:
        resp = requests.get(url, headers=headers, timeout=REQUEST_TIMEOUT)
    except requests.RequestException as e:
        logger.error("ページ取得失敗: url=%s, error=%s", url, e)
        raise NetworkError(str(e)) from e

    if resp.status_code == 503:
        logger.error("ブロックされました (503): url=%s", url)
        raise BlockedError()
    if not 200 <= resp.status_code < 300:
        logger.error("ページ取得失敗: url=%s, status=%d", url, resp.status_code)
        raise HttpStatusError(
            resp.status_code, f"Failed to fetch {target}. Status: {resp.status_code}"
        )

    return resp.text


def wait_interval(
    rng: random.Random | None = None,
    sleep=time.sleep,
) -> float:
    """リクエスト間隔を 2〜4 秒ランダムで待機する. 待機秒数を返す."""
    rng = rng or random.Random()
    interval = rng.uniform(REQUEST_INTERVAL_MIN, REQUEST_INTERVAL_MAX)
    sleep(interval)
    return interval
