"""rank_scanner モジュールのテスト."""

import random
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from listing_intel.errors import BlockedError, HttpStatusError
from listing_intel.models import RankResult, SearchNode
from listing_intel.rank_scanner import ScanState, find_rank, parse_search_page, scan_page

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def _load_fixture(name: str) -> str:
    return (FIXTURES_DIR / name).read_text(encoding="utf-8")


class TestParseSearchPage:
    """parse_search_page のテスト."""

    def test_nodes_in_document_order(self):
        nodes, _ = parse_search_page(_load_fixture("search_page1.html"))

        assert [n.asin for n in nodes] == [
            "B0SPONS001", "B0ORG00001", "B0ORG00002", "B0ORG00003", "B0ORG00004",
        ]

    def test_sponsored_flag(self):
        nodes, _ = parse_search_page(_load_fixture("search_page1.html"))

        assert [n.is_sponsored for n in nodes] == [True, False, False, False, False]

    def test_prices(self):
        nodes, _ = parse_search_page(_load_fixture("search_page1.html"))

        assert nodes[1].price == "499"
        assert nodes[3].price == "N/A"
        assert nodes[4].price == "1,099"

    def test_next_enabled_despite_disabled_previous(self):
        _, has_next = parse_search_page(_load_fixture("search_page1.html"))
        assert has_next is True

    def test_last_page(self):
        _, has_next = parse_search_page(_load_fixture("search_last_page.html"))
        assert has_next is False

    def test_no_pagination(self):
        nodes, has_next = parse_search_page("<html><body></body></html>")
        assert nodes == []
        assert has_next is False


class TestScanPage:
    """scan_page の累積カウンタ."""

    def test_counter_carried_over(self):
        nodes = [SearchNode("B0A", False, "N/A"), SearchNode("B0B", True, "N/A")]
        result, state = scan_page(nodes, "B0Z", ScanState(page=2, organic_count=10))

        assert result is None
        assert state == ScanState(page=2, organic_count=11)

    def test_organic_match(self):
        nodes = [SearchNode("B0A", False, "N/A"), SearchNode("b0z", False, "199")]
        result, _ = scan_page(nodes, "B0Z", ScanState(page=3, organic_count=4))

        assert result == RankResult(organic_rank=6, page=3, price="199", status="Organic")

    def test_sponsored_match(self):
        nodes = [SearchNode("B0A", False, "N/A"), SearchNode("B0Z", True, "299")]
        result, _ = scan_page(nodes, "B0Z", ScanState(page=1))

        assert result.status == "Sponsored"
        assert result.sponsored_rank == 1
        assert result.organic_rank is None


class TestFindRank:
    """find_rank のテスト（取得はモック）."""

    @patch("listing_intel.rank_scanner.fetch_html")
    def test_found_on_second_page(self, mock_fetch):
        mock_fetch.side_effect = [
            _load_fixture("search_page1.html"),
            _load_fixture("search_page2.html"),
            _load_fixture("search_last_page.html"),
        ]
        sleep = MagicMock()

        result = find_rank("B0TARGET01", "steel bottle", "amazon.in",
                           rng=random.Random(0), sleep=sleep)

        assert result.organic_rank == 5
        assert result.sponsored_rank is None
        assert result.page == 2
        assert result.price == "1,299"
        assert result.status == "Organic"
        assert mock_fetch.call_count == 2
        sleep.assert_called_once()
        assert 2.0 <= sleep.call_args.args[0] <= 4.0

    @patch("listing_intel.rank_scanner.fetch_html")
    def test_case_insensitive_match(self, mock_fetch):
        mock_fetch.side_effect = [_load_fixture("search_page1.html")]

        result = find_rank("b0org00002", "steel bottle", sleep=MagicMock())

        assert result.organic_rank == 2
        assert result.page == 1

    @patch("listing_intel.rank_scanner.fetch_html")
    def test_sponsored_result(self, mock_fetch):
        mock_fetch.side_effect = [_load_fixture("search_page1.html")]

        result = find_rank("B0SPONS001", "steel bottle", sleep=MagicMock())

        assert result.status == "Sponsored"
        assert result.sponsored_rank == 1
        assert result.organic_rank is None
        assert result.price == "999"

    @patch("listing_intel.rank_scanner.fetch_html")
    def test_not_found_stops_at_last_page(self, mock_fetch):
        mock_fetch.side_effect = [
            _load_fixture("search_page1.html"),
            _load_fixture("search_page2.html"),
            _load_fixture("search_last_page.html"),
        ]
        sleep = MagicMock()

        result = find_rank("B0MISSING1", "steel bottle", sleep=sleep)

        assert result == RankResult()
        assert result.status == "Not Found"
        assert mock_fetch.call_count == 3
        assert sleep.call_count == 2

    @patch("listing_intel.rank_scanner.fetch_html")
    def test_max_pages_limit(self, mock_fetch):
        mock_fetch.side_effect = [_load_fixture("search_page1.html")] * 3
        sleep = MagicMock()

        result = find_rank("B0MISSING1", "steel bottle", max_pages=2, sleep=sleep)

        assert result.status == "Not Found"
        assert mock_fetch.call_count == 2

    @patch("listing_intel.rank_scanner.fetch_html")
    def test_first_page_failure_raises(self, mock_fetch):
        mock_fetch.side_effect = BlockedError()

        with pytest.raises(BlockedError):
            find_rank("B0TARGET01", "steel bottle", sleep=MagicMock())

    @patch("listing_intel.rank_scanner.fetch_html")
    def test_later_page_failure_is_not_found(self, mock_fetch):
        mock_fetch.side_effect = [_load_fixture("search_page1.html"), HttpStatusError(500)]
        sleep = MagicMock()

        result = find_rank("B0TARGET01", "steel bottle", sleep=sleep)

        assert result.status == "Not Found"
        assert result.page is None
        # 失敗したページの取得前にも待機している
        assert sleep.call_count == 1

    @patch("listing_intel.rank_scanner.parse_search_page")
    @patch("listing_intel.rank_scanner.fetch_html")
    def test_later_page_parse_error_is_not_found(self, mock_fetch, mock_parse):
        page1 = _load_fixture("search_page1.html")
        mock_fetch.side_effect = [page1, "<html>broken</html>"]
        mock_parse.side_effect = [parse_search_page(page1), RuntimeError("broken markup")]

        result = find_rank("B0TARGET01", "steel bottle", sleep=MagicMock())

        assert result == RankResult()
        assert result.status == "Not Found"
        assert mock_parse.call_count == 2

    @patch("listing_intel.rank_scanner.parse_search_page")
    @patch("listing_intel.rank_scanner.fetch_html")
    def test_first_page_parse_error_raises(self, mock_fetch, mock_parse):
        mock_fetch.side_effect = ["<html>broken</html>"]
        mock_parse.side_effect = RuntimeError("broken markup")

        with pytest.raises(RuntimeError, match="broken markup"):
            find_rank("B0TARGET01", "steel bottle", sleep=MagicMock())

    @patch("listing_intel.fetcher.requests.get")
    def test_first_page_status_error_message(self, mock_get):
        mock_get.return_value = MagicMock(status_code=500, text="")

        with pytest.raises(HttpStatusError) as exc_info:
            find_rank("B0TARGET01", "steel bottle", sleep=MagicMock())

        assert exc_info.value.status_code == 500
        assert str(exc_info.value) == "Failed to fetch search results. Status: 500"

    @patch("listing_intel.rank_scanner.fetch_html")
    def test_search_urls_paginated(self, mock_fetch):
        mock_fetch.side_effect = [
            _load_fixture("search_page1.html"),
            _load_fixture("search_last_page.html"),
        ]

        find_rank("B0MISSING1", "steel bottle", "amazon.com", sleep=MagicMock())

        urls = [c.args[0] for c in mock_fetch.call_args_list]
        assert urls == [
            "https://www.amazon.com/s?k=steel+bottle&page=1",
            "https://www.amazon.com/s?k=steel+bottle&page=2",
        ]


class TestRankResult:
    def test_ranks_mutually_exclusive(self):
        with pytest.raises(ValueError):
            RankResult(organic_rank=1, sponsored_rank=1)
