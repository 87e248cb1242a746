"""改善アクションプラン生成モジュール.

比較マトリクスとキーワードギャップにルールを適用し、優先度順の
アクション一覧と総合スコアを作る。
"""

from __future__ import annotations

import logging

from listing_intel.models import BattlePlan, BattlePlanItem, KeywordGap, MatrixRow

logger = logging.getLogger(__name__)

BASE_SCORE = 95
STRONG_SCORE_THRESHOLD = 70

PRICE_ACTION_RATIO = 1.05
PRICE_PENALTY_RATIO = 1.10
IMAGE_ACTION_MIN = 7
IMAGE_PENALTY_MIN = 5
MANDATORY_PENALTY_COUNT = 3
TOP_MANDATORY_KEYWORDS = 5

PENALTY_NO_A_PLUS = 15
PENALTY_PRICE = 10
PENALTY_MANDATORY = 15
PENALTY_IMAGES = 10

STRATEGIC_TIP = (
    "Launch an exact-match Sponsored Products campaign on your top competitor "
    "keywords while the listing updates roll out, to defend organic rank."
)


def _competitor_mean_price(competitors: list[MatrixRow]) -> float | None:
    prices = [r.price for r in competitors if r.price is not None]
    if not prices:
        return None
    return sum(prices) / len(prices)


def build_plan_items(
    user: MatrixRow, competitors: list[MatrixRow], keyword_gaps: list[KeywordGap]
) -> list[BattlePlanItem]:
    items = [BattlePlanItem(type="Ads", action=STRATEGIC_TIP, impact="High", priority=0)]

    a_plus_rivals = [r.asin for r in competitors if r.has_a_plus]
    if not user.has_a_plus and a_plus_rivals:
        items.append(BattlePlanItem(
            type="Listing",
            action=(
                f"Add A+ content: {len(a_plus_rivals)} of {len(competitors)} "
                "competitors use enhanced brand content."
            ),
            impact="High",
            priority=1,
            data_tags=a_plus_rivals,
        ))

    mandatory = [g.keyword for g in keyword_gaps if g.is_mandatory][:TOP_MANDATORY_KEYWORDS]
    if mandatory:
        items.append(BattlePlanItem(
            type="Keywords",
            action=(
                "Add keywords every competitor ranks with to your title and bullets: "
                + ", ".join(mandatory)
            ),
            impact="High",
            priority=2,
            data_tags=mandatory,
        ))

    mean_price = _competitor_mean_price(competitors)
    if user.price is not None and mean_price and user.price > mean_price * PRICE_ACTION_RATIO:
        over = (user.price - mean_price) / mean_price * 100
        items.append(BattlePlanItem(
            type="Strategy",
            action=(
                f"Your price is {over:.0f}% above the competitor average. "
                "Consider a coupon or price adjustment."
            ),
            impact="Medium",
            priority=3,
            data_tags=[f"{user.price:,.0f}", f"{mean_price:,.0f}"],
        ))

    if user.image_count < IMAGE_ACTION_MIN:
        items.append(BattlePlanItem(
            type="Listing",
            action=(
                f"Increase image depth to at least {IMAGE_ACTION_MIN} "
                f"(currently {user.image_count}), including lifestyle and infographic shots."
            ),
            impact="Medium",
            priority=4,
        ))

    return sorted(items, key=lambda i: i.priority)


def overall_score(
    user: MatrixRow, competitors: list[MatrixRow], keyword_gaps: list[KeywordGap]
) -> int:
    score = BASE_SCORE
    if not user.has_a_plus:
        score -= PENALTY_NO_A_PLUS

    mean_price = _competitor_mean_price(competitors)
    if user.price is not None and mean_price and user.price > mean_price * PRICE_PENALTY_RATIO:
        score -= PENALTY_PRICE

    if sum(1 for g in keyword_gaps if g.is_mandatory) > MANDATORY_PENALTY_COUNT:
        score -= PENALTY_MANDATORY

    if user.image_count < IMAGE_PENALTY_MIN:
        score -= PENALTY_IMAGES

    return max(0, score)


def generate_battle_plan(matrix: list[MatrixRow], keyword_gaps: list[KeywordGap]) -> BattlePlan:
    """マトリクス（ユーザー行を含む）とキーワードギャップからプランを作る."""
    user = next((r for r in matrix if r.is_user), None)
    if user is None:
        raise ValueError("マトリクスにユーザー商品の行がありません")
    competitors = [r for r in matrix if not r.is_user]

    items = build_plan_items(user, competitors, keyword_gaps)
    score = overall_score(user, competitors, keyword_gaps)
    high_count = sum(1 for i in items if i.impact == "High")
    verdict = "strong" if score >= STRONG_SCORE_THRESHOLD else "underperforming"
    summary = (
        f"Your listing is {verdict} with an overall score of {score}/100. "
        f"{high_count} high-impact action{'s' if high_count != 1 else ''} identified."
    )

    logger.info("アクションプラン: score=%d, items=%d", score, len(items))
    return BattlePlan(overall_score=score, summary=summary, items=items)
