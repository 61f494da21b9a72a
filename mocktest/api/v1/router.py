"""API v1 router - includes all v1 endpoints."""

from fastapi import APIRouter

from mocktest.api.v1.endpoints import attempts, health, tests

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(health.router, prefix="", tags=["Health"])
api_router.include_router(tests.router)
api_router.include_router(attempts.router)
