"""商品リスティング分析 — メインエントリーポイント.

サブコマンド:
  scrape   ASIN 1 件の商品ページを取得
  bulk     複数 ASIN を順番に取得（進捗をログ出力）
  rank     キーワード検索での ASIN の順位を取得
  analyze  ユーザー商品と競合の比較分析（マトリクス・アクションプラン含む）
  seo      出品テキストの SEO スコア

結果は JSON で標準出力に書き出す。
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from datetime import datetime

from listing_intel.config import DEFAULT_DOMAIN, LOG_DIR, LOG_LEVEL
from listing_intel.scraper import parse_asin_list, scrape_products
from listing_intel.service import (
    handle_find_rank,
    handle_gap_analysis,
    handle_scrape,
    handle_seo_score,
)

logger = logging.getLogger(__name__)


def setup_logging() -> None:
    """ロギングの初期設定."""
    log_file = LOG_DIR / f"listing_intel_{datetime.now().strftime('%Y%m%d')}.log"
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.StreamHandler(sys.stderr),
            logging.FileHandler(log_file, encoding="utf-8"),
        ],
    )


def _emit(status: int, body: dict) -> int:
    json.dump(body, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")
    return 0 if status == 200 else 1


def run_bulk(asins_text: str, domain: str) -> int:
    asins = parse_asin_list(asins_text)
    if not asins:
        logger.warning("有効な ASIN がありません。終了します。")
        return 1

    logger.info("=== 一括取得 開始: %d 件 ===", len(asins))
    start_time = time.time()

    def on_progress(done: int, total: int, record) -> None:
        status = "エラー: " + record.error if record.error else "OK"
        logger.info("[%d/%d] %d%% %s → %s", done, total, done * 100 // total, record.asin, status)

    records = scrape_products(asins, domain, on_progress=on_progress)

    elapsed = time.time() - start_time
    logger.info("=== 一括取得 完了: 所要時間 %.1f 秒 ===", elapsed)
    return _emit(200, {"results": [r.to_dict() for r in records]})


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Marketplace listing intelligence")
    parser.add_argument("--domain", default=DEFAULT_DOMAIN, help="例: amazon.in")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("scrape", help="商品ページを1件取得")
    p.add_argument("asin")

    p = sub.add_parser("bulk", help="複数 ASIN を順番に取得")
    p.add_argument("asins", nargs="+", help="空白・カンマ区切りの ASIN")

    p = sub.add_parser("rank", help="キーワード検索順位を取得")
    p.add_argument("asin")
    p.add_argument("keyword")

    p = sub.add_parser("analyze", help="競合ギャップ分析")
    p.add_argument("user", help="ユーザー商品の ASIN")
    p.add_argument("competitors", nargs="+", help="競合の ASIN")

    p = sub.add_parser("seo", help="出品テキストの SEO スコア")
    p.add_argument("--title", default="")
    p.add_argument("--bullet", action="append", default=[], dest="bullets")
    p.add_argument("--description", default="")
    p.add_argument("--keywords", default="", help="カンマ区切り")

    return parser


def run(argv: list[str] | None = None) -> int:
    """メイン処理."""
    args = build_parser().parse_args(argv)
    setup_logging()

    if args.command == "scrape":
        return _emit(*handle_scrape({"asin": args.asin, "domain": args.domain}))
    if args.command == "bulk":
        return run_bulk(" ".join(args.asins), args.domain)
    if args.command == "rank":
        return _emit(*handle_find_rank(
            {"asin": args.asin, "keyword": args.keyword, "domain": args.domain}
        ))
    if args.command == "analyze":
        return _emit(*handle_gap_analysis(
            {"user": args.user, "competitors": args.competitors, "domain": args.domain}
        ))
    return _emit(*handle_seo_score({
        "title": args.title,
        "bullets": args.bullets,
        "description": args.description,
        "keywords": args.keywords,
    }))


if __name__ == "__main__":
    sys.exit(run())
