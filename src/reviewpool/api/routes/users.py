"""User endpoints"""
import logging
import time

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.assignment import DeactivationController
from ...core.errors import ReviewPoolError
from ...core.schemas.pull_request import PullRequestShort
from ...core.schemas.user import (
    BulkDeactivateRequest,
    BulkDeactivateResponse,
    SetIsActiveRequest,
    SlotOutcomeResponse,
    UserEnvelope,
    UserResponse,
    UserReviews,
)
from ...core.services import UserService
from ..dependencies import get_deactivation_controller, get_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users")


@router.post("/setIsActive", response_model=UserEnvelope)
async def set_is_active(
    request_data: SetIsActiveRequest,
    session: AsyncSession = Depends(get_session),
):
    """Activate or deactivate a single user."""
    try:
        user = await UserService(session).set_is_active(
            request_data.user_id, request_data.is_active
        )
        return UserEnvelope(user=UserResponse.model_validate(user))

    except ReviewPoolError:
        raise
    except Exception as e:
        await session.rollback()
        logger.error(f"Error updating user: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/getReview", response_model=UserReviews)
async def get_reviews(
    user_id: str = Query(..., min_length=1, description="Reviewer user ID"),
    session: AsyncSession = Depends(get_session),
):
    """List pull requests where the user is a reviewer."""
    pull_requests = await UserService(session).get_reviews(user_id)
    return UserReviews(
        user_id=user_id,
        pull_requests=[PullRequestShort.model_validate(pr) for pr in pull_requests],
    )


@router.post("/bulkDeactivate", response_model=BulkDeactivateResponse)
async def bulk_deactivate(
    request_data: BulkDeactivateRequest,
    controller: DeactivationController = Depends(get_deactivation_controller),
):
    """Deactivate several team members and reassign their open reviews.

    The call succeeds once the users are deactivated; slots that could not
    be refilled are listed in ``reassignments`` with the reason.
    """
    started = time.monotonic()
    try:
        report = await controller.bulk_deactivate(request_data.team_name, request_data.user_ids)

    except ReviewPoolError as e:
        logger.error(
            f"Bulk deactivation rejected for team {request_data.team_name}: {e.message}"
        )
        raise
    except Exception as e:
        await controller.session.rollback()
        logger.error(f"Error in bulk deactivation: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    duration_ms = int((time.monotonic() - started) * 1000)
    logger.info(
        f"Bulk deactivation completed: team={report.team_name} "
        f"users={len(report.deactivated_user_ids)} duration_ms={duration_ms}"
    )

    return BulkDeactivateResponse(
        team_name=report.team_name,
        deactivated_users=report.deactivated_user_ids,
        reassignments=[
            SlotOutcomeResponse(
                pull_request_id=slot.pull_request_id,
                old_reviewer_id=slot.old_reviewer_id,
                status=slot.status.value,
                new_reviewer_id=slot.new_reviewer_id,
                detail=slot.detail,
            )
            for slot in report.slots
        ],
        duration_ms=duration_ms,
    )
