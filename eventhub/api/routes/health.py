from fastapi import APIRouter
from typing import Dict

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=Dict[str, str])
async def health_check():
    """Liveness probe; the store is in-process so there is nothing else to check."""
    return {"status": "healthy"}
