"""データモデル定義."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from listing_intel.config import NOT_AVAILABLE

RankStatus = Literal["Organic", "Sponsored", "Not Found"]
MetricStatus = Literal["better", "worse", "neutral"]
Importance = Literal["high", "medium", "low"]
BulletsQuality = Literal["High", "Medium", "Low"]
PlanItemType = Literal["Listing", "Keywords", "Ads", "Strategy"]
Impact = Literal["High", "Medium", "Low"]


@dataclass(frozen=True)
class ProductRecord:
    """取得時点の商品ページ1件のスナップショット.

    error がセットされている場合、asin と url 以外はすべてデフォルト値。
    """

    asin: str
    url: str
    title: str = NOT_AVAILABLE
    price: str = NOT_AVAILABLE  # 数字と区切り文字のみ (例: "1,299")
    mrp: str = NOT_AVAILABLE
    sold_by: str = NOT_AVAILABLE
    category: str = NOT_AVAILABLE
    rating: str = NOT_AVAILABLE  # 例: "4.3 out of 5 stars"
    review_count: str = NOT_AVAILABLE
    image_count: int = 0
    bsr: str = NOT_AVAILABLE
    description: str = NOT_AVAILABLE
    bullets: tuple[str, ...] = ()
    has_a_plus: bool = False
    has_store: bool = False
    error: str | None = None

    @classmethod
    def failed(cls, asin: str, url: str, error: str) -> ProductRecord:
        """取得失敗時のレコードを生成する."""
        return cls(asin=asin, url=url, error=error)

    def matches(self, asin: str) -> bool:
        return self.asin.upper() == asin.upper()

    def to_dict(self) -> dict:
        data = {
            "asin": self.asin,
            "title": self.title,
            "price": self.price,
            "mrp": self.mrp,
            "soldBy": self.sold_by,
            "category": self.category,
            "rating": self.rating,
            "reviews": self.review_count,
            "images": self.image_count,
            "bsr": self.bsr,
            "description": self.description,
            "bullets": list(self.bullets),
            "hasAPlus": self.has_a_plus,
            "hasStore": self.has_store,
            "url": self.url,
        }
        if self.error is not None:
            data["error"] = self.error
        return data


@dataclass
class SearchNode:
    """検索結果ページ上の商品ノード1件."""

    asin: str
    is_sponsored: bool
    price: str  # 正規化済み。取得できなければ "N/A"


@dataclass
class RankResult:
    """キーワード検索順位の取得結果.

    organic_rank と sponsored_rank が同時に値を持つことはない。
    """

    organic_rank: int | None = None
    sponsored_rank: int | None = None
    page: int | None = None  # 1〜10
    price: str | None = None
    status: RankStatus = "Not Found"

    def __post_init__(self) -> None:
        if self.organic_rank is not None and self.sponsored_rank is not None:
            raise ValueError("organic_rank と sponsored_rank は排他")

    def to_dict(self) -> dict:
        return {
            "organicRank": self.organic_rank,
            "sponsoredRank": self.sponsored_rank,
            "page": self.page,
            "price": self.price,
            "status": self.status,
        }


@dataclass
class MetricComparison:
    """ユーザー商品と競合平均の比較1項目."""

    label: str
    user_value: str
    competitor_avg: str
    status: MetricStatus
    improvement: str

    def to_dict(self) -> dict:
        return {
            "label": self.label,
            "userValue": self.user_value,
            "competitorAvg": self.competitor_avg,
            "status": self.status,
            "improvement": self.improvement,
        }


@dataclass
class KeywordGap:
    """競合のみが使っているキーワード.

    volume は推定値であり、実測の検索ボリュームではない。
    """

    keyword: str
    competitor_frequency: int
    volume: int  # 推定値
    type: Literal["Broad", "Phrase"]
    importance: Importance
    is_mandatory: bool

    def to_dict(self) -> dict:
        return {
            "keyword": self.keyword,
            "competitorFrequency": self.competitor_frequency,
            "volume": self.volume,
            "volumeIsEstimate": True,
            "type": self.type,
            "importance": self.importance,
            "isMandatory": self.is_mandatory,
        }


@dataclass
class ContentAudit:
    """商品ページ1件の A9 風 SEO 監査結果."""

    asin: str
    is_user: bool
    score: int  # 0〜100
    title_length: int
    bullet_count: int
    image_count: int
    has_brand_in_title: bool
    bullets_quality: BulletsQuality

    def to_dict(self) -> dict:
        return {
            "asin": self.asin,
            "isUser": self.is_user,
            "score": self.score,
            "titleLength": self.title_length,
            "bulletCount": self.bullet_count,
            "imageCount": self.image_count,
            "hasBrandInTitle": self.has_brand_in_title,
            "bulletsQuality": self.bullets_quality,
        }


@dataclass(frozen=True)
class EstimatedSignals:
    """実データにアクセスできない競合シグナルの推定値.

    広告出稿・クーポン・バッジ等はいずれも計測値ではない。
    """

    ads_running: Literal["High", "Medium", "Low", "None"]
    offer_percent: int
    has_coupon: bool
    badge: str | None
    keyword_rank: int
    keyword_volume: int
    is_estimate: bool = field(default=True, init=False)

    def to_dict(self) -> dict:
        return {
            "adsRunning": self.ads_running,
            "offerPercent": self.offer_percent,
            "hasCoupon": self.has_coupon,
            "badge": self.badge,
            "keywordRank": self.keyword_rank,
            "keywordVolume": self.keyword_volume,
            "isEstimate": self.is_estimate,
        }


@dataclass
class MatrixRow:
    """競合比較マトリクスの1行（1商品）."""

    asin: str
    label: str  # "Your Product" / "Competitor 1" ...
    is_user: bool
    price: float | None
    rating: float | None
    review_count: str
    image_count: int
    title_length: int
    title_optimization: Literal["Excellent", "Good", "Average", "Poor"]
    image_quality: Literal["Premium", "Normal", "Basic"]
    has_a_plus: bool
    has_store: bool
    has_brand_in_title: bool
    estimates: EstimatedSignals

    def to_dict(self) -> dict:
        return {
            "asin": self.asin,
            "label": self.label,
            "isUser": self.is_user,
            "price": self.price,
            "rating": self.rating,
            "reviews": self.review_count,
            "images": self.image_count,
            "titleLength": self.title_length,
            "titleOptimization": self.title_optimization,
            "imageQuality": self.image_quality,
            "hasAPlus": self.has_a_plus,
            "hasStore": self.has_store,
            "hasBrandInTitle": self.has_brand_in_title,
            "estimated": self.estimates.to_dict(),
        }


@dataclass
class BattlePlanItem:
    """改善アクション1件. priority が小さいほど優先."""

    type: PlanItemType
    action: str
    impact: Impact
    priority: int
    data_tags: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "action": self.action,
            "impact": self.impact,
            "priority": self.priority,
            "dataTags": list(self.data_tags),
        }


@dataclass
class BattlePlan:
    overall_score: int
    summary: str
    items: list[BattlePlanItem]

    def to_dict(self) -> dict:
        return {
            "overallScore": self.overall_score,
            "summary": self.summary,
            "items": [i.to_dict() for i in self.items],
        }


@dataclass
class GapAnalysisResult:
    metrics: list[MetricComparison]
    keyword_gaps: list[KeywordGap]
    audits: list[ContentAudit]
    matrix: list[MatrixRow] | None = None
    battle_plan: BattlePlan | None = None

    def to_dict(self) -> dict:
        data = {
            "metrics": [m.to_dict() for m in self.metrics],
            "keywordGaps": [g.to_dict() for g in self.keyword_gaps],
            "audits": [a.to_dict() for a in self.audits],
        }
        if self.matrix is not None:
            data["matrix"] = [r.to_dict() for r in self.matrix]
        if self.battle_plan is not None:
            data["battlePlan"] = self.battle_plan.to_dict()
        return data


@dataclass
class SEOAnalysis:
    score: int  # 0〜100
    suggestions: list[str]

    def to_dict(self) -> dict:
        return {"score": self.score, "suggestions": list(self.suggestions)}
