"""Pull request endpoints"""
import logging

from fastapi import APIRouter, Depends, HTTPException

from ...core.assignment import AssignmentEngine
from ...core.errors import ReviewPoolError
from ...core.schemas.pull_request import (
    MergeRequest,
    PullRequestCreate,
    PullRequestEnvelope,
    PullRequestResponse,
    ReassignRequest,
    ReassignResponse,
)
from ..dependencies import get_engine

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/pullRequest")


@router.post("/create", response_model=PullRequestEnvelope, status_code=201)
async def create_pull_request(
    pr_data: PullRequestCreate,
    engine: AssignmentEngine = Depends(get_engine),
):
    """Open a pull request.

    Up to two active members of the author's team, excluding the author,
    are picked at random as reviewers.
    """
    try:
        pull_request = await engine.create_pr(
            pr_data.pull_request_id, pr_data.pull_request_name, pr_data.author_id
        )
        return PullRequestEnvelope(pr=PullRequestResponse.model_validate(pull_request))

    except ReviewPoolError:
        raise
    except Exception as e:
        await engine.session.rollback()
        logger.error(f"Error creating pull request: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/merge", response_model=PullRequestEnvelope)
async def merge_pull_request(
    merge_data: MergeRequest,
    engine: AssignmentEngine = Depends(get_engine),
):
    """Mark a pull request as merged. Repeating the call is harmless."""
    try:
        pull_request = await engine.merge_pr(merge_data.pull_request_id)
        return PullRequestEnvelope(pr=PullRequestResponse.model_validate(pull_request))

    except ReviewPoolError:
        raise
    except Exception as e:
        await engine.session.rollback()
        logger.error(f"Error merging pull request: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/reassign", response_model=ReassignResponse)
async def reassign_reviewer(
    reassign_data: ReassignRequest,
    engine: AssignmentEngine = Depends(get_engine),
):
    """Replace one reviewer with an active member of the same team."""
    try:
        result = await engine.reassign_reviewer(
            reassign_data.pull_request_id, reassign_data.old_user_id
        )
        return ReassignResponse(
            pr=PullRequestResponse.model_validate(result.pull_request),
            replaced_by=result.replaced_by,
        )

    except ReviewPoolError:
        raise
    except Exception as e:
        await engine.session.rollback()
        logger.error(f"Error reassigning reviewer: {e}")
        raise HTTPException(status_code=500, detail=str(e))
