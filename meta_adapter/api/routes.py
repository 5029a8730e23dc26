"""
API Routes Configuration
"""

from fastapi import APIRouter

from meta_adapter.api.endpoints import health, meta_adapter, web3

# Create main router
router = APIRouter()

# Include endpoint routers
router.include_router(meta_adapter.router, tags=["meta-adapter"])
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(web3.router, prefix="/web3", tags=["web3"])
