"""ユーザー商品と競合平均のスカラー指標比較モジュール."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable

from listing_intel.config import CURRENCY_SYMBOLS, DEFAULT_DOMAIN
from listing_intel.extractor import parse_number
from listing_intel.models import MetricComparison, ProductRecord


@dataclass(frozen=True)
class MetricSpec:
    """比較指標の定義."""

    label: str
    value: Callable[[ProductRecord], float | None]
    lower_is_better: bool
    format_user: Callable[[float], str]
    format_avg: Callable[[float], str]
    hint: Callable[[float, float], str]  # (user, avg) -> 劣っている場合の改善メッセージ
    affirmation: str


def _price_hint(user: float, avg: float) -> str:
    if avg <= 0:
        return "Price is above market avg."
    return f"Price is {(user - avg) / avg * 100:.0f}% above market avg."


def _image_hint(user: float, avg: float) -> str:
    return f"Add {math.ceil(avg - user)} more images."


def _rating_hint(user: float, avg: float) -> str:
    return f"Rating trails market avg by {avg - user:.1f} stars."


def default_metric_specs(currency: str) -> list[MetricSpec]:
    return [
        MetricSpec(
            label="Market Price Difference",
            value=lambda p: parse_number(p.price),
            lower_is_better=True,
            format_user=lambda v: f"{currency}{v:,.0f}",
            format_avg=lambda v: f"{currency}{round(v):,}",
            hint=_price_hint,
            affirmation="Pricing is professional/competitive.",
        ),
        MetricSpec(
            label="Listing Visual Depth",
            value=lambda p: float(p.image_count),
            lower_is_better=False,
            format_user=lambda v: f"{v:.0f} Images",
            format_avg=lambda v: f"{round(v)} Avg",
            hint=_image_hint,
            affirmation="Visual depth meets industry standards.",
        ),
        MetricSpec(
            label="Customer Rating",
            value=lambda p: parse_number(p.rating),
            lower_is_better=False,
            format_user=lambda v: f"{v:.1f} Stars",
            format_avg=lambda v: f"{v:.1f} Avg",
            hint=_rating_hint,
            affirmation="Rating is at or above the market average.",
        ),
    ]


def competitor_mean(
    competitors: list[ProductRecord], value: Callable[[ProductRecord], float | None]
) -> float | None:
    """値を持つ競合のみで算術平均を取る. 1件もなければ None."""
    values = [v for v in (value(c) for c in competitors) if v is not None]
    if not values:
        return None
    return sum(values) / len(values)


def compare_metric(
    spec: MetricSpec, user: ProductRecord, competitors: list[ProductRecord]
) -> MetricComparison:
    user_value = spec.value(user)
    avg = competitor_mean(competitors, spec.value)

    if user_value is None or avg is None:
        return MetricComparison(
            label=spec.label,
            user_value=spec.format_user(user_value) if user_value is not None else "N/A",
            competitor_avg=spec.format_avg(avg) if avg is not None else "N/A",
            status="neutral",
            improvement="Not enough data to compare.",
        )

    if spec.lower_is_better:
        better = user_value <= avg
    else:
        better = user_value >= avg

    return MetricComparison(
        label=spec.label,
        user_value=spec.format_user(user_value),
        competitor_avg=spec.format_avg(avg),
        status="better" if better else "worse",
        improvement=spec.affirmation if better else spec.hint(user_value, avg),
    )


def compare_metrics(
    user: ProductRecord,
    competitors: list[ProductRecord],
    domain: str = DEFAULT_DOMAIN,
) -> list[MetricComparison]:
    """価格・画像枚数・評価をユーザー商品と競合平均で比較する."""
    currency = CURRENCY_SYMBOLS.get(domain, "")
    return [compare_metric(spec, user, competitors) for spec in default_metric_specs(currency)]
