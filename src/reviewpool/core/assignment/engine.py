"""Assignment engine: reviewer selection on PR creation and on-demand reassignment."""
import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import (
    AuthorNotFoundError,
    NoCandidateError,
    NotAssignedError,
    PRExistsError,
    PRMergedError,
    PRNotFoundError,
    UserNotFoundError,
)
from ..models import PullRequest
from ..storage.repositories import PullRequestRepository, TeamRepository, UserRepository
from .eligibility import eligible_candidates, pick_replacement
from .selector import ReviewerSelector

logger = logging.getLogger(__name__)

DEFAULT_MAX_REVIEWERS = 2


@dataclass
class ReassignmentResult:
    """Outcome of a successful single-reviewer swap."""
    pull_request: PullRequest
    replaced_by: str


class AssignmentEngine:
    """Assigns and reassigns pull request reviewers.

    Each public method is one unit of work on ``session`` and commits on
    success. Errors are raised before any write, so a failed call leaves the
    pull request untouched.
    """

    def __init__(
        self,
        session: AsyncSession,
        selector: Optional[ReviewerSelector] = None,
        max_reviewers: int = DEFAULT_MAX_REVIEWERS,
    ):
        """Initialize the engine.

        Args:
            session: Database session for this unit of work
            selector: Random reviewer selector; a fresh unseeded one if omitted
            max_reviewers: Reviewers picked when a pull request is opened
        """
        self.session = session
        self.selector = selector or ReviewerSelector()
        self.max_reviewers = max_reviewers
        self.users = UserRepository(session)
        self.teams = TeamRepository(session)
        self.pull_requests = PullRequestRepository(session)

    async def create_pr(self, pr_id: str, name: str, author_id: str) -> PullRequest:
        """Open a pull request and assign reviewers from the author's team.

        Args:
            pr_id: New pull request id
            name: Pull request title
            author_id: Author user id

        Returns:
            The persisted pull request

        Raises:
            PRExistsError: If ``pr_id`` is taken
            AuthorNotFoundError: If the author does not exist
        """
        if await self.pull_requests.exists(pr_id):
            raise PRExistsError()

        author = await self.users.get(author_id)
        if author is None:
            raise AuthorNotFoundError()

        pool = await eligible_candidates(self.users, author.team_name, exclude=[author.user_id])
        reviewer_ids = self.selector.select(pool, self.max_reviewers)

        try:
            pull_request = await self.pull_requests.create(pr_id, name, author_id, reviewer_ids)
            await self.session.commit()
        except IntegrityError:
            # Lost a race with a concurrent create of the same id
            await self.session.rollback()
            raise PRExistsError()

        logger.info(
            "Created PR %s by %s with reviewers %s", pr_id, author_id, reviewer_ids
        )
        return pull_request

    async def merge_pr(self, pr_id: str) -> PullRequest:
        """Mark a pull request merged. Merging a merged PR is a no-op.

        Raises:
            PRNotFoundError: If the pull request does not exist
        """
        pull_request = await self.pull_requests.merge(pr_id)
        if pull_request is None:
            raise PRNotFoundError()
        await self.session.commit()
        logger.info("PR %s is merged", pr_id)
        return pull_request

    async def reassign_reviewer(self, pr_id: str, old_user_id: str) -> ReassignmentResult:
        """Replace one reviewer with a random active member of their team.

        The pull request row stays locked from the first read until commit,
        so concurrent reassignments on the same PR cannot interleave.

        Args:
            pr_id: Pull request id
            old_user_id: Reviewer to replace

        Returns:
            ReassignmentResult with the updated pull request and new reviewer id

        Raises:
            PRNotFoundError: If the pull request does not exist
            PRMergedError: If the pull request is merged
            NotAssignedError: If ``old_user_id`` is not a current reviewer
            UserNotFoundError: If the old reviewer's record is gone
            NoCandidateError: If nobody on the team is eligible
        """
        pull_request = await self.pull_requests.get(pr_id, for_update=True)
        if pull_request is None:
            raise PRNotFoundError()
        if pull_request.is_merged:
            raise PRMergedError()
        if old_user_id not in pull_request.assigned_reviewers:
            raise NotAssignedError()

        old_reviewer = await self.users.get(old_user_id)
        if old_reviewer is None:
            raise UserNotFoundError()

        new_user_id = await pick_replacement(self.users, self.selector, pull_request, old_reviewer)
        if new_user_id is None:
            raise NoCandidateError()

        pull_request = await self.pull_requests.replace_reviewer(pr_id, old_user_id, new_user_id)
        await self.session.commit()

        logger.info("PR %s: reviewer %s replaced by %s", pr_id, old_user_id, new_user_id)
        return ReassignmentResult(pull_request=pull_request, replaced_by=new_user_id)
