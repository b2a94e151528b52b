"""
API routes aggregation.
"""

from fastapi import APIRouter

from .workspaces import router as workspaces_router
from .usage import router as usage_router
from .brands import router as brands_router

router = APIRouter()

router.include_router(workspaces_router, prefix="/workspaces", tags=["workspaces"])
router.include_router(usage_router, prefix="/workspaces", tags=["usage"])
router.include_router(brands_router, prefix="/workspaces", tags=["brands"])
