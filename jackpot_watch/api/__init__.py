from fastapi import APIRouter

from .jackpots import router as jackpots_router


router = APIRouter()
router.include_router(jackpots_router)
