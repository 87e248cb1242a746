"""共通フィクスチャ."""

import pytest

from listing_intel.models import ProductRecord


@pytest.fixture
def make_product():
    """テスト用 ProductRecord のファクトリ."""

    def _make(asin: str = "B0USER0001", **overrides) -> ProductRecord:
        fields = {
            "url": f"https://www.amazon.in/dp/{asin}",
            "title": "Acme Steel Bottle",
            "price": "500",
            "sold_by": "Acme Retail",
            "rating": "4.2 out of 5 stars",
            "image_count": 5,
            "bullets": ("Keeps drinks cold",),
        }
        fields.update(overrides)
        if "bullets" in overrides:
            fields["bullets"] = tuple(overrides["bullets"])
        return ProductRecord(asin=asin, **fields)

    return _make
