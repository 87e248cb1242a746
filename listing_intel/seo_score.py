"""出品テキストの SEO スコアリング.

タイトル長・キーワード網羅率・箇条書き数・説明文長の 4 項目を各 25 点で評価する。
"""

from __future__ import annotations

from listing_intel.models import SEOAnalysis

CHECK_POINTS = 25
TITLE_MIN_LENGTH = 150
TITLE_MAX_LENGTH = 200
TITLE_PARTIAL_POINTS = 15
MIN_BULLETS = 5
MIN_DESCRIPTION_LENGTH = 500
MAX_MISSING_KEYWORDS_SHOWN = 3

ALL_PASSED_MESSAGE = "Great job! Your listing follows best practices."


def score_listing_seo(
    title: str,
    bullets: list[str],
    description: str,
    target_keywords: list[str],
) -> SEOAnalysis:
    score = 0.0
    suggestions: list[str] = []

    # タイトル長
    if TITLE_MIN_LENGTH <= len(title) <= TITLE_MAX_LENGTH:
        score += CHECK_POINTS
    elif title:
        score += TITLE_PARTIAL_POINTS
        if len(title) < TITLE_MIN_LENGTH:
            suggestions.append(
                "Title is too short. Aim for 150-200 characters for maximum visibility."
            )
        else:
            suggestions.append(
                "Title is too long. Some marketplaces truncate after 200 characters."
            )
    else:
        suggestions.append("Add a title of 150-200 characters.")

    # キーワード網羅率
    content = " ".join([title, *bullets, description]).lower()
    if target_keywords:
        missing = [kw for kw in target_keywords if kw.lower() not in content]
        found = len(target_keywords) - len(missing)
        score += found / len(target_keywords) * CHECK_POINTS
        if missing:
            suggestions.append(
                "Missing important keywords: "
                + ", ".join(missing[:MAX_MISSING_KEYWORDS_SHOWN])
            )
    else:
        score += CHECK_POINTS

    # 箇条書き
    if len(bullets) >= MIN_BULLETS:
        score += CHECK_POINTS
    else:
        score += len(bullets) / MIN_BULLETS * CHECK_POINTS
        suggestions.append("Include at least 5 bullet points to highlight product benefits.")

    # 説明文
    if len(description) >= MIN_DESCRIPTION_LENGTH:
        score += CHECK_POINTS
    else:
        score += len(description) / MIN_DESCRIPTION_LENGTH * CHECK_POINTS
        suggestions.append(
            "Product description is brief. Expand to 500+ characters "
            "to improve rank and conversion."
        )

    return SEOAnalysis(score=round(score), suggestions=suggestions or [ALL_PASSED_MESSAGE])
