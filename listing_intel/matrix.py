"""競合比較マトリクス構築モジュール.

各行は抽出済みの実データ（価格・評価・画像・A+/ストア有無）と、
SignalEstimator による推定シグナルを組み合わせる。推定シグナルは
EstimatedSignals 型に閉じ込め、実測値としては扱わない。
"""

from __future__ import annotations

import random

from listing_intel.content_audit import has_brand_in_title
from listing_intel.extractor import parse_number
from listing_intel.models import EstimatedSignals, MatrixRow, ProductRecord

MAX_MATRIX_COMPETITORS = 3


class SignalEstimator:
    """広告出稿・クーポン等、取得手段のないシグナルの推定器.

    実データソースに差し替える場合はこのクラスを継承して estimate を実装する。
    """

    def estimate(self, product: ProductRecord, is_user: bool) -> EstimatedSignals:
        raise NotImplementedError


class RandomSignalEstimator(SignalEstimator):
    """乱数によるプレースホルダ推定器."""

    ADS_LEVELS = ("High", "Medium", "Low", "None")
    BADGES = (None, "Best Seller", "Amazon's Choice")

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()

    def estimate(self, product: ProductRecord, is_user: bool) -> EstimatedSignals:
        return EstimatedSignals(
            ads_running=self.rng.choice(self.ADS_LEVELS),
            offer_percent=self.rng.randint(0, 40),
            has_coupon=self.rng.random() < 0.3,
            badge=self.rng.choice(self.BADGES),
            keyword_rank=self.rng.randint(1, 50),
            keyword_volume=self.rng.randint(1000, 50000),
        )


def title_optimization(title_length: int) -> str:
    if title_length > 150:
        return "Excellent"
    if title_length > 100:
        return "Good"
    if title_length < 50:
        return "Poor"
    return "Average"


def image_quality(image_count: int) -> str:
    if image_count >= 7:
        return "Premium"
    if image_count >= 4:
        return "Normal"
    return "Basic"


def build_row(
    product: ProductRecord, label: str, is_user: bool, estimator: SignalEstimator
) -> MatrixRow:
    return MatrixRow(
        asin=product.asin,
        label=label,
        is_user=is_user,
        price=parse_number(product.price),
        rating=parse_number(product.rating),
        review_count=product.review_count,
        image_count=product.image_count,
        title_length=len(product.title),
        title_optimization=title_optimization(len(product.title)),
        image_quality=image_quality(product.image_count),
        has_a_plus=product.has_a_plus,
        has_store=product.has_store,
        has_brand_in_title=has_brand_in_title(product),
        estimates=estimator.estimate(product, is_user),
    )


def build_competitive_matrix(
    user: ProductRecord,
    competitors: list[ProductRecord],
    estimator: SignalEstimator | None = None,
) -> list[MatrixRow]:
    """ユーザー商品 → 競合（最大3件、入力順）の順で行を作る."""
    estimator = estimator or RandomSignalEstimator()
    rows = [build_row(user, "Your Product", True, estimator)]
    for i, competitor in enumerate(competitors[:MAX_MATRIX_COMPETITORS], start=1):
        rows.append(build_row(competitor, f"Competitor {i}", False, estimator))
    return rows
