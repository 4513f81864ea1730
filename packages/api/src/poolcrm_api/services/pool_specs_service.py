"""
services/pool_specs_service.py — Product spec scraper for fiberglass pool models.

Fetches each model's product page, reads the specs accordion and extracts
size, depth and approximate gallons. Results are written to a JSON file that
later calls serve from unless a refresh is forced.

Usage:
    scraper = PoolSpecsScraper()
    result = await scraper.get_specs()            # cache file if present
    result = await scraper.get_specs(force=True)  # re-scrape every model
"""

from __future__ import annotations

import asyncio
import json
import re
from html.parser import HTMLParser
from pathlib import Path
from typing import Any

import httpx
import structlog

from poolcrm_shared.config import settings

from poolcrm_api.utils.cache import pool_specs_cache
from poolcrm_api.utils.retry import with_retry

log = structlog.get_logger(__name__)

USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"
SPECS_CLASS = "accordion__body_inner"
NOT_AVAILABLE = "N/A"

POOL_MODELS: tuple[str, ...] = (
    "aruba",
    "astoria-collection",
    "axiom-12",
    "axiom-12-deluxe",
    "axiom-14",
    "axiom-16",
    "barcelona",
    "bay-isle",
    "bermuda",
    "cambridge",
    "cancun",
    "cancun-deluxe",
    "cape-cod",
    "caribbean",
    "claremont",
    "corinthian-12",
    "corinthian-14",
    "corinthian-16",
    "coronado",
    "delray",
    "enchantment-9-17",
    "enchantment-9-21",
    "enchantment-9-24",
    "fiji",
    "genesis",
    "jamaica",
    "java",
    "key-west",
    "kingston",
    "laguna",
    "laguna-deluxe",
    "lake-shore",
    "milan",
    "monaco",
    "olympia-12",
    "olympia-14",
    "olympia-16",
    "pleasant-cove",
    "providence-14",
    "st-lucia",
    "st-thomas",
    "synergy",
    "tuscan-11-20",
    "tuscan-13-24",
    "tuscan-14-27",
    "tuscan-14-30",
    "tuscan-14-40",
    "valencia",
    "vista-isle",
)

_SIZE_RE = re.compile(r"Size:\s*(.*?)\s*(?=Depth|$)", re.IGNORECASE)
_DEPTH_RE = re.compile(r"Depth:\s*(.*?)\s*(?=Gallons|$)", re.IGNORECASE)
_GALLONS_RE = re.compile(r"Gallons Approx:\s*(.*?)(?=$)", re.IGNORECASE)

_VOID_TAGS = frozenset(
    {"area", "base", "br", "col", "embed", "hr", "img", "input", "link", "meta", "source", "wbr"}
)


class _SpecsBlockParser(HTMLParser):
    """Collects the text content of the first element carrying SPECS_CLASS."""

    def __init__(self) -> None:
        super().__init__()
        self.found = False
        self._depth = 0
        self._done = False
        self._chunks: list[str] = []

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if self._done or tag in _VOID_TAGS:
            return
        if self._depth:
            self._depth += 1
            return
        classes = (dict(attrs).get("class") or "").split()
        if SPECS_CLASS in classes:
            self.found = True
            self._depth = 1

    def handle_endtag(self, tag: str) -> None:
        if self._done or not self._depth or tag in _VOID_TAGS:
            return
        self._depth -= 1
        if self._depth == 0:
            self._done = True

    def handle_data(self, data: str) -> None:
        if self._depth and not self._done:
            self._chunks.append(data)

    @property
    def text(self) -> str:
        return " ".join(" ".join(self._chunks).split())


def extract_specs_text(html: str) -> str | None:
    """Whitespace-collapsed text of the specs accordion, or None if absent."""
    parser = _SpecsBlockParser()
    parser.feed(html)
    parser.close()
    return parser.text if parser.found else None


def parse_specs(text: str) -> dict[str, str]:
    def first(pattern: re.Pattern[str]) -> str:
        match = pattern.search(text)
        value = match.group(1).strip() if match else ""
        return value or NOT_AVAILABLE

    return {
        "size": first(_SIZE_RE),
        "depth": first(_DEPTH_RE),
        "gallons": first(_GALLONS_RE),
    }


class PoolSpecsScraper:
    """Scrapes and caches specs for every model in POOL_MODELS."""

    def __init__(
        self,
        *,
        base_url: str | None = None,
        cache_path: str | Path | None = None,
        delay_seconds: float | None = None,
        timeout: float = 30.0,
        models: tuple[str, ...] = POOL_MODELS,
    ) -> None:
        self._base_url = (base_url or settings.pool_specs_base_url).rstrip("/")
        self._cache_path = Path(cache_path or settings.pool_specs_cache_path)
        self._delay = settings.scrape_delay_seconds if delay_seconds is None else delay_seconds
        self._timeout = timeout
        self._models = models
        self._log = log.bind(source_name="pool_specs")

    # ------------------------------------------------------------------
    # Cache file
    # ------------------------------------------------------------------

    def read_cache(self) -> dict[str, Any] | None:
        if not self._cache_path.exists():
            return None
        try:
            return json.loads(self._cache_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            self._log.warning("pool_specs_cache_unreadable", path=str(self._cache_path),
                              error=str(exc))
            return None

    def write_cache(self, data: dict[str, Any]) -> None:
        self._cache_path.parent.mkdir(parents=True, exist_ok=True)
        self._cache_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        self._log.info("pool_specs_cache_written", path=str(self._cache_path), models=len(data))

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    @with_retry(max_attempts=3, base_delay=1.0)
    async def _fetch_page(self, client: httpx.AsyncClient, model: str) -> str:
        url = f"{self._base_url}/{model}/"
        response = await client.get(url)
        response.raise_for_status()
        return response.text

    async def fetch_model(self, client: httpx.AsyncClient, model: str) -> dict[str, str] | None:
        """Specs for one model; None when the page or its specs block is unavailable."""
        self._log.info("pool_specs_fetch", model=model)
        try:
            html = await self._fetch_page(client, model)
        except httpx.HTTPError as exc:
            self._log.error("pool_specs_fetch_failed", model=model, error=str(exc))
            return None

        text = extract_specs_text(html)
        if text is None:
            self._log.warning("pool_specs_block_missing", model=model)
            return None
        return parse_specs(text)

    async def scrape_all(self) -> dict[str, dict[str, str] | None]:
        results: dict[str, dict[str, str] | None] = {}
        headers = {"User-Agent": USER_AGENT}
        async with httpx.AsyncClient(
            timeout=self._timeout, headers=headers, follow_redirects=True
        ) as client:
            for index, model in enumerate(self._models):
                if index and self._delay > 0:
                    await asyncio.sleep(self._delay)
                results[model] = await self.fetch_model(client, model)

        failed = [m for m, specs in results.items() if specs is None]
        self._log.info(
            "pool_specs_scrape_complete",
            models=len(results),
            failed=len(failed),
        )
        return results

    # ------------------------------------------------------------------
    # Public entry point
    # ------------------------------------------------------------------

    async def get_specs(self, force: bool = False) -> dict[str, Any]:
        """
        Return {"message", "data", "fromCache"}.

        The cache file wins unless force is set; a fresh scrape rewrites it.
        """
        if not force:
            cached = pool_specs_cache.get("pool_specs") or self.read_cache()
            if cached is not None:
                pool_specs_cache.set("pool_specs", cached)
                return {
                    "message": "Pool specs retrieved from cache",
                    "data": cached,
                    "fromCache": True,
                }

        data = await self.scrape_all()
        self.write_cache(data)
        pool_specs_cache.set("pool_specs", data)
        return {
            "message": "Pool specs scraped successfully",
            "data": data,
            "fromCache": False,
        }
