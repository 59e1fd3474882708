from fastapi import APIRouter

from . import session

router = APIRouter()
router.include_router(session.router, prefix="/session", tags=["session"])
