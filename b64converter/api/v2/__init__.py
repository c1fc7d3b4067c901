"""
API v2 - converter session endpoints.
"""
from fastapi import APIRouter
from b64converter.api.v2.sessions import router as sessions_router

router = APIRouter()
router.include_router(sessions_router)
