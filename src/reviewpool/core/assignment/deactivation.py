"""Bulk deactivation with best-effort reviewer backfill."""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import (
    BatchValidationError,
    ReviewPoolError,
    TeamNotFoundError,
    UserNotFoundError,
)
from ..storage.repositories import PullRequestRepository, TeamRepository, UserRepository
from .eligibility import pick_replacement, reviewers_among
from .selector import ReviewerSelector

logger = logging.getLogger(__name__)


class SlotStatus(str, Enum):
    """What happened to one reviewer slot held by a deactivated user."""
    REASSIGNED = "reassigned"
    NO_CANDIDATE = "no_candidate"
    REVIEWER_NOT_FOUND = "reviewer_not_found"
    SKIPPED = "skipped"
    WRITE_FAILED = "write_failed"


@dataclass
class SlotOutcome:
    pull_request_id: str
    old_reviewer_id: str
    status: SlotStatus
    new_reviewer_id: Optional[str] = None
    detail: Optional[str] = None


@dataclass
class DeactivationReport:
    """Result of a bulk deactivation.

    Deactivation itself always happened when a report exists; ``slots`` tells
    which reviewer slots were backfilled and why the others were left alone.
    """
    team_name: str
    deactivated_user_ids: list[str]
    slots: list[SlotOutcome] = field(default_factory=list)

    @property
    def reassigned(self) -> list[SlotOutcome]:
        return [slot for slot in self.slots if slot.status == SlotStatus.REASSIGNED]

    @property
    def unresolved(self) -> list[SlotOutcome]:
        return [slot for slot in self.slots if slot.status != SlotStatus.REASSIGNED]


class DeactivationController:
    """Deactivates a batch of team members and backfills their open review slots."""

    def __init__(self, session: AsyncSession, selector: Optional[ReviewerSelector] = None):
        self.session = session
        self.selector = selector or ReviewerSelector()
        self.users = UserRepository(session)
        self.teams = TeamRepository(session)
        self.pull_requests = PullRequestRepository(session)

    async def bulk_deactivate(self, team_name: str, user_ids: Sequence[str]) -> DeactivationReport:
        """Deactivate ``user_ids`` and reassign their reviews on open PRs.

        Validation runs before any write and is all-or-nothing. Once it
        passes, the deactivation is committed and never undone; each reviewer
        slot is then backfilled independently, and failures are recorded in
        the report instead of being raised.

        Args:
            team_name: Team every user must belong to
            user_ids: Users to deactivate

        Returns:
            DeactivationReport with one outcome per affected reviewer slot

        Raises:
            BatchValidationError: If the batch is empty or a user is on another team
            TeamNotFoundError: If the team does not exist
            UserNotFoundError: If a user does not exist
        """
        deactivated = list(dict.fromkeys(user_ids))
        await self._validate(team_name, deactivated)

        # Snapshot before mutating so slots moved by this call are not missed
        snapshot = [
            (pull_request.pull_request_id, reviewers_among(pull_request, deactivated))
            for pull_request in await self.pull_requests.list_open_by_reviewers(deactivated)
        ]

        await self.users.bulk_set_active(deactivated, False)
        await self.session.commit()
        logger.info("Deactivated %d users in team %s", len(deactivated), team_name)

        report = DeactivationReport(team_name=team_name, deactivated_user_ids=deactivated)
        for pr_id, old_reviewer_ids in snapshot:
            for old_reviewer_id in old_reviewer_ids:
                outcome = await self._backfill_slot(pr_id, old_reviewer_id, deactivated)
                if outcome.status != SlotStatus.REASSIGNED:
                    logger.warning(
                        "PR %s: reviewer %s left in place (%s%s)",
                        pr_id,
                        old_reviewer_id,
                        outcome.status.value,
                        f": {outcome.detail}" if outcome.detail else "",
                    )
                report.slots.append(outcome)

        logger.info(
            "Bulk deactivation for %s: %d of %d reviewer slots reassigned",
            team_name,
            len(report.reassigned),
            len(report.slots),
        )
        return report

    async def _validate(self, team_name: str, user_ids: list[str]) -> None:
        if not user_ids:
            raise BatchValidationError("user_ids must not be empty")

        if not await self.teams.exists(team_name):
            raise TeamNotFoundError()

        for user_id in user_ids:
            user = await self.users.get(user_id)
            if user is None:
                raise UserNotFoundError(f"user {user_id} not found")
            if user.team_name != team_name:
                raise BatchValidationError(
                    f"user {user_id} does not belong to team {team_name}"
                )

    async def _backfill_slot(
        self, pr_id: str, old_reviewer_id: str, deactivated: list[str]
    ) -> SlotOutcome:
        """Try to replace one deactivated reviewer; commit or roll back on its own."""
        try:
            old_reviewer = await self.users.get(old_reviewer_id)
            if old_reviewer is None:
                return SlotOutcome(pr_id, old_reviewer_id, SlotStatus.REVIEWER_NOT_FOUND)

            # Re-read under lock: earlier slots of this PR may already be refilled
            pull_request = await self.pull_requests.get(pr_id, for_update=True)
            if pull_request is None or pull_request.is_merged:
                await self.session.rollback()
                return SlotOutcome(
                    pr_id, old_reviewer_id, SlotStatus.SKIPPED, detail="PR no longer open"
                )
            if old_reviewer_id not in pull_request.assigned_reviewers:
                await self.session.rollback()
                return SlotOutcome(
                    pr_id, old_reviewer_id, SlotStatus.SKIPPED, detail="reviewer no longer assigned"
                )

            new_reviewer_id = await pick_replacement(
                self.users, self.selector, pull_request, old_reviewer, extra_exclude=deactivated
            )
            if new_reviewer_id is None:
                await self.session.rollback()
                return SlotOutcome(pr_id, old_reviewer_id, SlotStatus.NO_CANDIDATE)

            await self.pull_requests.replace_reviewer(pr_id, old_reviewer_id, new_reviewer_id)
            await self.session.commit()
        except (ReviewPoolError, SQLAlchemyError) as e:
            await self.session.rollback()
            return SlotOutcome(pr_id, old_reviewer_id, SlotStatus.WRITE_FAILED, detail=str(e))

        return SlotOutcome(
            pr_id, old_reviewer_id, SlotStatus.REASSIGNED, new_reviewer_id=new_reviewer_id
        )
