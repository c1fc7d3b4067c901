"""
API v1 - stateless conversion endpoints.
"""
from fastapi import APIRouter
from b64converter.api.v1.convert import router as convert_router

router = APIRouter()
router.include_router(convert_router)
