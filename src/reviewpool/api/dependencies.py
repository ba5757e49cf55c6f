"""Shared FastAPI dependencies"""
from typing import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.assignment import AssignmentEngine, DeactivationController, ReviewerSelector
from ..core.storage.database import get_db


async def get_session() -> AsyncIterator[AsyncSession]:
    """Get database session dependency."""
    db = get_db()
    async with db.session() as session:
        yield session


def get_selector(request: Request) -> ReviewerSelector:
    """The app-wide reviewer selector built at startup."""
    return request.app.state.selector


def get_engine(
    request: Request,
    session: AsyncSession = Depends(get_session),
    selector: ReviewerSelector = Depends(get_selector),
) -> AssignmentEngine:
    return AssignmentEngine(
        session,
        selector=selector,
        max_reviewers=request.app.state.config.max_reviewers,
    )


def get_deactivation_controller(
    session: AsyncSession = Depends(get_session),
    selector: ReviewerSelector = Depends(get_selector),
) -> DeactivationController:
    return DeactivationController(session, selector=selector)
