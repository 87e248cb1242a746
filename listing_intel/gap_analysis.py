"""競合ギャップ分析 — 各分析を同じ入力に対して実行し結果をまとめる."""

from __future__ import annotations

import logging
import random

from listing_intel.battle_plan import generate_battle_plan
from listing_intel.config import DEFAULT_DOMAIN
from listing_intel.content_audit import audit_products
from listing_intel.errors import ValidationError
from listing_intel.keyword_gap import find_keyword_gaps
from listing_intel.matrix import RandomSignalEstimator, SignalEstimator, build_competitive_matrix
from listing_intel.metrics import compare_metrics
from listing_intel.models import GapAnalysisResult, ProductRecord

logger = logging.getLogger(__name__)


def perform_gap_analysis(
    user: ProductRecord,
    competitors: list[ProductRecord],
    domain: str = DEFAULT_DOMAIN,
    rng: random.Random | None = None,
    estimator: SignalEstimator | None = None,
    include_matrix: bool = True,
) -> GapAnalysisResult:
    """ユーザー商品と競合商品の比較分析を行う.

    Args:
        user: ユーザー商品
        competitors: 競合商品（1件以上）
        domain: 通貨表記に使うマーケットプレイスのドメイン
        rng: 推定ボリュームのゆらぎ・推定シグナルに使う乱数源
        estimator: 推定シグナルの推定器。省略時は rng による乱数推定
        include_matrix: False の場合マトリクスとアクションプランを省略

    Raises:
        ValidationError: 競合が0件の場合
    """
    if not competitors:
        raise ValidationError("At least one competitor is required")
    rng = rng or random.Random()

    logger.info("ギャップ分析: user=%s, competitors=%d", user.asin, len(competitors))
    keyword_gaps = find_keyword_gaps(user, competitors, rng)
    result = GapAnalysisResult(
        metrics=compare_metrics(user, competitors, domain),
        keyword_gaps=keyword_gaps,
        audits=audit_products(user, competitors),
    )

    if include_matrix:
        matrix = build_competitive_matrix(
            user, competitors, estimator or RandomSignalEstimator(rng)
        )
        result.matrix = matrix
        result.battle_plan = generate_battle_plan(matrix, keyword_gaps)

    return result
