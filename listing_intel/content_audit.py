"""商品ページの A9 風 SEO 監査モジュール.

実際の検索アルゴリズムではなく、コンテンツの充実度を加点方式で評価する
ヒューリスティック。

    タイトル長   最大 35 点（140 文字で満点、線形）
    箇条書き数   1 件 6 点、最大 30 点
    画像枚数     1 枚 3 点、最大 20 点
    ブランド名   タイトルが出品者名の先頭語で始まれば 15 点
"""

from __future__ import annotations

from listing_intel.config import NOT_AVAILABLE
from listing_intel.models import BulletsQuality, ContentAudit, ProductRecord

TITLE_TARGET_LENGTH = 140
TITLE_MAX_POINTS = 35
POINTS_PER_BULLET = 6
BULLET_MAX_POINTS = 30
POINTS_PER_IMAGE = 3
IMAGE_MAX_POINTS = 20
BRAND_IN_TITLE_POINTS = 15


def brand_name(product: ProductRecord) -> str:
    """出品者名の先頭語（小文字）. 出品者不明なら空文字."""
    if product.sold_by == NOT_AVAILABLE:
        return ""
    tokens = product.sold_by.split()
    return tokens[0].lower() if tokens else ""


def has_brand_in_title(product: ProductRecord) -> bool:
    """タイトルが出品者名の先頭語で始まるか（大文字小文字無視）."""
    brand = brand_name(product)
    return bool(brand) and product.title.lower().startswith(brand)


def title_points(title_length: int) -> float:
    return min(TITLE_MAX_POINTS, title_length / TITLE_TARGET_LENGTH * TITLE_MAX_POINTS)


def bullets_quality(bullet_count: int) -> BulletsQuality:
    if bullet_count >= 5:
        return "High"
    if bullet_count >= 3:
        return "Medium"
    return "Low"


def calculate_a9_score(product: ProductRecord) -> int:
    score = title_points(len(product.title))
    score += min(BULLET_MAX_POINTS, len(product.bullets) * POINTS_PER_BULLET)
    score += min(IMAGE_MAX_POINTS, product.image_count * POINTS_PER_IMAGE)
    if has_brand_in_title(product):
        score += BRAND_IN_TITLE_POINTS
    return round(score)


def audit_product(product: ProductRecord, is_user: bool = False) -> ContentAudit:
    return ContentAudit(
        asin=product.asin,
        is_user=is_user,
        score=calculate_a9_score(product),
        title_length=len(product.title),
        bullet_count=len(product.bullets),
        image_count=product.image_count,
        has_brand_in_title=has_brand_in_title(product),
        bullets_quality=bullets_quality(len(product.bullets)),
    )


def audit_products(user: ProductRecord, competitors: list[ProductRecord]) -> list[ContentAudit]:
    """ユーザー商品を先頭に、全商品の監査結果を返す."""
    audits = [audit_product(user, is_user=True)]
    audits.extend(audit_product(c, is_user=c.matches(user.asin)) for c in competitors)
    return audits
