"""設定モジュール — 環境変数・定数定義."""

import os
from pathlib import Path

from dotenv import load_dotenv

# .env はプロジェクトルートに配置
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(_PROJECT_ROOT / ".env")

# --- マーケットプレイス ---
DEFAULT_DOMAIN: str = os.environ.get("MARKETPLACE_DOMAIN", "amazon.in")
PRODUCT_URL_TEMPLATE = "https://www.{domain}/dp/{asin}"
SEARCH_URL_TEMPLATE = "https://www.{domain}/s?k={keyword}&page={page}"

CURRENCY_SYMBOLS = {
    "amazon.in": "₹",
    "amazon.com": "$",
    "amazon.ca": "$",
    "amazon.co.uk": "£",
    "amazon.de": "€",
    "amazon.fr": "€",
    "amazon.it": "€",
    "amazon.es": "€",
    "amazon.co.jp": "¥",
}

# --- User-Agent ---
USER_AGENTS = [
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/119.0.0.0 Safari/537.36",
    "Mozilla/5.0 (X11; Linux x86_64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:109.0) "
    "Gecko/20100101 Firefox/115.0",
]

# User-Agent 以外の固定ヘッダ
BASE_HEADERS = {
    "Accept": (
        "text/html,application/xhtml+xml,application/xml;q=0.9,"
        "image/avif,image/webp,image/apng,*/*;q=0.8"
    ),
    "Accept-Language": "en-US,en;q=0.9",
    "Accept-Encoding": "gzip, deflate, br",
    "Device-Memory": "8",
    "Upgrade-Insecure-Requests": "1",
    "DNT": "1",
    "Connection": "keep-alive",
}

# --- リクエスト設定 ---
REQUEST_INTERVAL_MIN = 2.0
REQUEST_INTERVAL_MAX = 4.0
REQUEST_TIMEOUT = float(os.environ.get("REQUEST_TIMEOUT", "15"))  # 秒

# --- 検索順位 ---
MAX_SEARCH_PAGES = 10

# --- 抽出 ---
NOT_AVAILABLE = "N/A"
DESCRIPTION_MAX_LENGTH = 500
CATEGORY_MAX_LENGTH = 100

# --- ログ ---
LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO")
LOG_DIR = _PROJECT_ROOT / "logs"
LOG_DIR.mkdir(exist_ok=True)
