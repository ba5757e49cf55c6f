"""Team endpoints"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.errors import ReviewPoolError
from ...core.schemas.team import TeamCreate, TeamEnvelope, TeamResponse
from ...core.services import MemberSpec, TeamService
from ..dependencies import get_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/team")


@router.post("/add", response_model=TeamEnvelope, status_code=201)
async def create_team(
    team_data: TeamCreate,
    session: AsyncSession = Depends(get_session),
):
    """Create a team and create or update its members.

    Users that already exist are moved into the new team.
    """
    try:
        team = await TeamService(session).create_team(
            team_data.team_name,
            [
                MemberSpec(user_id=m.user_id, username=m.username, is_active=m.is_active)
                for m in team_data.members
            ],
        )
        return TeamEnvelope(team=TeamResponse.model_validate(team))

    except ReviewPoolError:
        raise
    except Exception as e:
        await session.rollback()
        logger.error(f"Error creating team: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/get", response_model=TeamResponse)
async def get_team(
    team_name: str = Query(..., min_length=1, description="Team name"),
    session: AsyncSession = Depends(get_session),
):
    """Get a team with its members."""
    team = await TeamService(session).get_team(team_name)
    return team
