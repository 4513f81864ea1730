"""Pool spec catalogue action. Public: no admin is resolved."""

from __future__ import annotations

from typing import Any

import structlog

from poolcrm_api.errors import AppError, InternalError
from poolcrm_api.responses import ActionFailure, ActionSuccess, fail_from, ok
from poolcrm_api.services.pool_specs_service import PoolSpecsScraper

logger = structlog.get_logger(__name__)


async def get_pool_specs(
    force: bool = False, scraper: PoolSpecsScraper | None = None
) -> ActionSuccess[Any] | ActionFailure:
    scraper = scraper or PoolSpecsScraper()
    try:
        return ok(await scraper.get_specs(force=force))
    except AppError as exc:
        return fail_from(exc)
    except Exception as exc:
        logger.error("pool_specs_failed", error=str(exc), exc_info=True)
        return fail_from(InternalError())
