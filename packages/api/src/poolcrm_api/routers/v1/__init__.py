from fastapi import APIRouter

from poolcrm_api.routers.v1 import (
    auth,
    calendar,
    communications,
    customers,
    estimates,
    notes,
    pool_specs,
    pools,
    properties,
)

v1_router = APIRouter(prefix="/v1")

v1_router.include_router(auth.router)
v1_router.include_router(customers.router)
v1_router.include_router(properties.router)
v1_router.include_router(pools.router)
v1_router.include_router(communications.router)
v1_router.include_router(notes.router)
v1_router.include_router(estimates.router)
v1_router.include_router(calendar.router)
v1_router.include_router(pool_specs.router)
