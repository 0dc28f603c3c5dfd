from fastapi import APIRouter

from compat_catalog.routers.catalog import router as catalog_router
from compat_catalog.routers.updater import router as updater_router

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(catalog_router)
api_router.include_router(updater_router)
