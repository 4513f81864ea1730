"""Pool spec catalogue endpoint (unauthenticated, rate limited)."""

from __future__ import annotations

from fastapi import APIRouter, Query

from poolcrm_api.actions.pool_specs import get_pool_specs
from poolcrm_api.responses import to_response

router = APIRouter(prefix="/pool-specs", tags=["pool-specs"])


@router.get("")
async def pool_specs(force: bool = Query(False, description="Ignore the cache and re-scrape")):
    return to_response(await get_pool_specs(force=force))
