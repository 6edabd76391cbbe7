from fastapi import APIRouter
from . import entries, journey

router = APIRouter()
router.include_router(journey.router, prefix="/api/steps")
router.include_router(entries.router, prefix="/api/steps")
