"""extractor モジュールのユニットテスト."""

from pathlib import Path

from listing_intel.extractor import (
    clean_category,
    clean_seller,
    extract_product,
    normalize_price,
    parse_number,
)

FIXTURES_DIR = Path(__file__).parent / "fixtures"
URL = "https://www.amazon.in/dp/B0TARGET01"


def _load_fixture(name: str) -> str:
    return (FIXTURES_DIR / name).read_text(encoding="utf-8")


class TestExtractPrimarySelectors:
    """主セレクタで全フィールドが取れるページ."""

    def setup_method(self):
        self.record = extract_product(_load_fixture("product_full.html"), "B0TARGET01", URL)

    def test_title(self):
        assert self.record.title.startswith("Acme Insulated Stainless Steel Water Bottle")
        assert self.record.title.endswith("Office Gym Travel")

    def test_prices_normalized(self):
        assert self.record.price == "1,299"
        assert self.record.mrp == "1,999.00"

    def test_seller_boilerplate_stripped(self):
        assert self.record.sold_by == "Acme Retail"

    def test_category_breadcrumb(self):
        assert self.record.category == "Home & Kitchen > Kitchen & Dining > Water Bottles"

    def test_rating_and_reviews(self):
        assert self.record.rating == "4.3 out of 5 stars"
        assert self.record.review_count == "2,345 ratings"

    def test_image_count(self):
        """li.item のみを数えること."""
        assert self.record.image_count == 6

    def test_bullets_keep_order_and_skip_empty(self):
        assert self.record.bullets == (
            "Double wall vacuum insulation keeps drinks cold for 24 hours",
            "Leak proof lid safe for backpacks",
            "Food grade 304 stainless steel, BPA free",
            "Wide mouth for easy cleaning and ice cubes",
            "Powder coated sweat free exterior",
        )

    def test_description(self):
        assert self.record.description.startswith("The Acme bottle is built")

    def test_a_plus_and_store(self):
        assert self.record.has_a_plus is True
        assert self.record.has_store is True

    def test_bsr(self):
        assert self.record.bsr == "1,234"

    def test_identity(self):
        assert self.record.asin == "B0TARGET01"
        assert self.record.url == URL
        assert self.record.error is None


class TestExtractFallbackSelectors:
    """主セレクタが外れ、フォールバックで取れるページ."""

    def setup_method(self):
        self.record = extract_product(_load_fixture("product_fallback.html"), "B0FALLBACK1", URL)

    def test_title_fallback(self):
        assert self.record.title == "Budget Plastic Sipper 750ml"

    def test_price_fallback(self):
        assert self.record.price == "849.00"
        assert self.record.mrp == "999.00"

    def test_seller_fallback(self):
        assert self.record.sold_by == "Budget Store"

    def test_category_fallback(self):
        assert self.record.category == "Sports > Fitness > Water Bottles"

    def test_rating_from_icon_text(self):
        assert self.record.rating == "4.1 out of 5 stars"
        assert self.record.review_count == "87 ratings"

    def test_image_count_fallback(self):
        assert self.record.image_count == 3

    def test_bullets_fallback(self):
        assert self.record.bullets == ("Lightweight sipper for kids", "Flip top straw")

    def test_description_from_a_plus(self):
        assert self.record.description.startswith("Meet the Budget sipper")
        assert self.record.has_a_plus is True

    def test_store_banner(self):
        assert self.record.has_store is True

    def test_missing_bsr(self):
        assert self.record.bsr == "N/A"


class TestExtractDefaults:
    """全戦略が外れた場合のデフォルト値."""

    def test_empty_page(self):
        record = extract_product("<html><body><p>nothing</p></body></html>", "B0EMPTY001", URL)

        assert record.title == "N/A"
        assert record.price == "N/A"
        assert record.sold_by == "N/A"
        assert record.image_count == 0
        assert record.bullets == ()
        assert record.to_dict()["bullets"] == []
        assert record.has_a_plus is False
        assert record.has_store is False
        assert record.error is None

    def test_malformed_rating_text_skipped(self):
        record = extract_product(_load_fixture("product_bad_rating.html"), "B0BAD00001", URL)

        assert record.title == "Plain Bottle"
        assert record.rating == "N/A"

    def test_description_capped(self):
        html = f"<div id='productDescription'>{'x' * 800}</div>"
        record = extract_product(html, "B0LONG0001", URL)
        assert len(record.description) == 500


class TestNormalization:
    """正規化ヘルパのテスト."""

    def test_normalize_price(self):
        assert normalize_price("₹1,299.") == "1,299"
        assert normalize_price("$ 24.99") == "24.99"
        assert normalize_price("") == "N/A"
        assert normalize_price(None) == "N/A"
        assert normalize_price("Currently unavailable") == "N/A"

    def test_parse_number(self):
        assert parse_number("1,299") == 1299.0
        assert parse_number("4.3 out of 5 stars") == 4.3
        assert parse_number("N/A") is None
        assert parse_number("") is None

    def test_comma_decimal_locales(self):
        assert parse_number(normalize_price("1.299,00 €")) == 1299.0
        assert parse_number(normalize_price("24,99 €")) == 24.99
        assert parse_number("4,5 von 5 Sternen") == 4.5
        assert parse_number("1,299.00") == 1299.0
        assert parse_number("2,345 ratings") == 2345.0

    def test_clean_seller(self):
        assert clean_seller("Sold by  Acme Retail and Fulfilled by Amazon.") == "Acme Retail"
        assert clean_seller("Acme Retail") == "Acme Retail"

    def test_clean_category_truncated(self):
        category = clean_category("Segment " * 20)
        assert len(category) == 103
        assert category.endswith("...")
