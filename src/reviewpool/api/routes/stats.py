"""Statistics endpoints"""
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.schemas.stats import StatsResponse
from ...core.services import StatsService
from ..dependencies import get_session

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/stats", response_model=StatsResponse)
async def get_statistics(
    session: AsyncSession = Depends(get_session),
):
    """Get reviewer assignment statistics."""
    try:
        stats = await StatsService(session).get_stats()
        return StatsResponse.model_validate(stats)

    except Exception as e:
        logger.error(f"Error getting statistics: {e}")
        raise HTTPException(status_code=500, detail=str(e))
