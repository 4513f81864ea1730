"""Tests for the pool spec scraper.

HTTP is mocked with respx; the fixture page mirrors the product page layout.
"""

from __future__ import annotations

import json
from pathlib import Path

import httpx
import pytest
import respx

from poolcrm_api.actions.pool_specs import get_pool_specs
from poolcrm_api.services.pool_specs_service import (
    POOL_MODELS,
    PoolSpecsScraper,
    extract_specs_text,
    parse_specs,
)

FIXTURES = Path(__file__).parent / "fixtures"
BASE_URL = "https://pools.example.com/products"


@pytest.fixture
def model_page() -> str:
    return (FIXTURES / "pool_model_page.html").read_text()


def _scraper(tmp_path: Path, models=("cancun", "fiji")) -> PoolSpecsScraper:
    return PoolSpecsScraper(
        base_url=BASE_URL,
        cache_path=tmp_path / "pool-specs.json",
        delay_seconds=0,
        models=models,
    )


class TestParsing:
    def test_extracts_specs_block_only(self, model_page: str):
        text = extract_specs_text(model_page)
        assert text == "Size: 14' x 28' Depth: 3'6\" - 6'0\" Gallons Approx: 11,500"

    def test_parse_specs(self, model_page: str):
        specs = parse_specs(extract_specs_text(model_page))
        assert specs == {"size": "14' x 28'", "depth": "3'6\" - 6'0\"", "gallons": "11,500"}

    def test_missing_fields_are_na(self):
        assert parse_specs("Size: 12' x 24'") == {
            "size": "12' x 24'",
            "depth": "N/A",
            "gallons": "N/A",
        }

    def test_page_without_block(self):
        assert extract_specs_text("<html><body><p>Size: 1</p></body></html>") is None

    def test_catalogue(self):
        assert len(POOL_MODELS) == len(set(POOL_MODELS))
        assert "cancun" in POOL_MODELS


class TestScraper:
    @pytest.mark.asyncio
    async def test_scrape_writes_cache(self, tmp_path: Path, model_page: str):
        scraper = _scraper(tmp_path)
        with respx.mock() as router:
            router.get(f"{BASE_URL}/cancun/").mock(
                return_value=httpx.Response(200, text=model_page)
            )
            router.get(f"{BASE_URL}/fiji/").mock(return_value=httpx.Response(404))
            result = await scraper.get_specs()

        assert result["fromCache"] is False
        assert result["message"] == "Pool specs scraped successfully"
        assert result["data"]["cancun"]["gallons"] == "11,500"
        assert result["data"]["fiji"] is None

        cached = json.loads((tmp_path / "pool-specs.json").read_text())
        assert cached == result["data"]

    @pytest.mark.asyncio
    async def test_cache_file_is_served(self, tmp_path: Path):
        data = {"cancun": {"size": "14' x 28'", "depth": "N/A", "gallons": "N/A"}}
        (tmp_path / "pool-specs.json").write_text(json.dumps(data))
        scraper = _scraper(tmp_path)

        with respx.mock(assert_all_called=False) as router:
            route = router.get(url__regex=r".*").mock(return_value=httpx.Response(500))
            result = await scraper.get_specs()

        assert result == {
            "message": "Pool specs retrieved from cache",
            "data": data,
            "fromCache": True,
        }
        assert not route.called

    @pytest.mark.asyncio
    async def test_force_rescrapes(self, tmp_path: Path, model_page: str):
        (tmp_path / "pool-specs.json").write_text(json.dumps({"stale": None}))
        scraper = _scraper(tmp_path, models=("cancun",))

        with respx.mock() as router:
            router.get(f"{BASE_URL}/cancun/").mock(
                return_value=httpx.Response(200, text=model_page)
            )
            result = await scraper.get_specs(force=True)

        assert result["fromCache"] is False
        assert list(result["data"]) == ["cancun"]

    @pytest.mark.asyncio
    async def test_unreadable_cache_triggers_scrape(self, tmp_path: Path, model_page: str):
        (tmp_path / "pool-specs.json").write_text("{not json")
        scraper = _scraper(tmp_path, models=("cancun",))

        with respx.mock() as router:
            router.get(f"{BASE_URL}/cancun/").mock(
                return_value=httpx.Response(200, text=model_page)
            )
            result = await scraper.get_specs()

        assert result["fromCache"] is False


@pytest.mark.asyncio
async def test_action_maps_unexpected_errors(tmp_path: Path):
    class BrokenScraper(PoolSpecsScraper):
        async def get_specs(self, force: bool = False):
            raise OSError("disk full")

    result = await get_pool_specs(scraper=BrokenScraper(cache_path=tmp_path / "x.json"))
    assert result.code == "INTERNAL_ERROR"
