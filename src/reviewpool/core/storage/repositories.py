"""Repositories over an AsyncSession.

Repositories flush but never commit; the caller owns the unit of work.
"""
from datetime import datetime, timezone
from typing import Iterable, Optional, Sequence

from sqlalchemy import exists, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import AlreadyAssignedError, NotAssignedError, PRNotFoundError
from ..models import PRStatus, PullRequest, ReviewerAssignment, Team, User


class UserRepository:
    """User directory."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, user_id: str) -> Optional[User]:
        return await self.session.get(User, user_id)

    async def get_active_by_team(
        self, team_name: str, exclude_ids: Iterable[str] = ()
    ) -> list[User]:
        """Active members of ``team_name`` not in ``exclude_ids``, ordered by user id."""
        query = select(User).where(User.team_name == team_name, User.is_active.is_(True))
        exclude = set(exclude_ids)
        if exclude:
            query = query.where(User.user_id.not_in(exclude))
        result = await self.session.execute(query.order_by(User.user_id))
        return list(result.scalars().all())

    async def set_active(self, user_id: str, is_active: bool) -> Optional[User]:
        user = await self.get(user_id)
        if user is None:
            return None
        user.is_active = is_active
        await self.session.flush()
        return user

    async def bulk_set_active(self, user_ids: Sequence[str], is_active: bool) -> int:
        """Set the active flag for every id in one statement.

        Returns:
            Number of rows updated
        """
        if not user_ids:
            return 0
        result = await self.session.execute(
            update(User)
            .where(User.user_id.in_(list(user_ids)))
            .values(is_active=is_active, updated_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount

    async def upsert(self, user_id: str, username: str, team_name: str, is_active: bool) -> User:
        user = await self.get(user_id)
        if user is None:
            user = User(
                user_id=user_id,
                username=username,
                team_name=team_name,
                is_active=is_active,
            )
            self.session.add(user)
        else:
            user.username = username
            user.team_name = team_name
            user.is_active = is_active
        await self.session.flush()
        return user

    async def count(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(User))
        return result.scalar_one()


class TeamRepository:
    """Team directory."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def exists(self, team_name: str) -> bool:
        result = await self.session.execute(
            select(exists().where(Team.team_name == team_name))
        )
        return bool(result.scalar())

    async def get(self, team_name: str) -> Optional[Team]:
        """Load a team with a freshly read member roster."""
        team = await self.session.get(Team, team_name)
        if team is None:
            return None
        await self.session.refresh(team, attribute_names=["members"])
        return team

    async def create(self, team_name: str) -> Team:
        team = Team(team_name=team_name)
        self.session.add(team)
        await self.session.flush()
        return team


class PullRequestRepository:
    """PR store, including the reviewer slots of each pull request."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def exists(self, pr_id: str) -> bool:
        result = await self.session.execute(
            select(exists().where(PullRequest.pull_request_id == pr_id))
        )
        return bool(result.scalar())

    async def get(self, pr_id: str, for_update: bool = False) -> Optional[PullRequest]:
        """Load a pull request with its reviewers.

        Args:
            pr_id: Pull request id
            for_update: Lock the row until the transaction ends

        Returns:
            PullRequest or None
        """
        query = (
            select(PullRequest)
            .where(PullRequest.pull_request_id == pr_id)
            .execution_options(populate_existing=True)
        )
        if for_update:
            query = query.with_for_update()
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def create(
        self, pr_id: str, name: str, author_id: str, reviewer_ids: Sequence[str]
    ) -> PullRequest:
        pull_request = PullRequest(
            pull_request_id=pr_id,
            pull_request_name=name,
            author_id=author_id,
            status=PRStatus.OPEN.value,
            created_at=datetime.now(timezone.utc),
            assignments=[
                ReviewerAssignment(user_id=user_id, position=position)
                for position, user_id in enumerate(reviewer_ids)
            ],
        )
        self.session.add(pull_request)
        await self.session.flush()
        return pull_request

    async def replace_reviewer(self, pr_id: str, old_user_id: str, new_user_id: str) -> PullRequest:
        """Swap one reviewer for another in place, under a row lock.

        The slot is only rewritten while it still holds ``old_user_id``, so a
        writer that read the pull request before a concurrent swap committed
        cannot overwrite it.

        Raises:
            PRNotFoundError: If the pull request does not exist
            NotAssignedError: If ``old_user_id`` is not a current reviewer
            AlreadyAssignedError: If ``new_user_id`` already reviews this PR
        """
        pull_request = await self.get(pr_id, for_update=True)
        if pull_request is None:
            raise PRNotFoundError()

        if old_user_id not in pull_request.assigned_reviewers:
            raise NotAssignedError()
        if new_user_id in pull_request.assigned_reviewers:
            raise AlreadyAssignedError()

        try:
            result = await self.session.execute(
                update(ReviewerAssignment)
                .where(
                    ReviewerAssignment.pull_request_id == pr_id,
                    ReviewerAssignment.user_id == old_user_id,
                )
                .values(user_id=new_user_id, assigned_at=datetime.now(timezone.utc))
                .execution_options(synchronize_session="fetch")
            )
        except IntegrityError:
            # (pull_request_id, user_id) is unique
            raise AlreadyAssignedError()
        if result.rowcount == 0:
            raise NotAssignedError()
        return pull_request

    async def merge(self, pr_id: str) -> Optional[PullRequest]:
        """Mark a pull request as merged; a merged one is returned unchanged."""
        pull_request = await self.get(pr_id, for_update=True)
        if pull_request is None:
            return None
        if pull_request.is_merged:
            return pull_request

        pull_request.status = PRStatus.MERGED.value
        pull_request.merged_at = datetime.now(timezone.utc)
        await self.session.flush()
        return pull_request

    async def list_open_by_reviewers(self, user_ids: Sequence[str]) -> list[PullRequest]:
        """Open pull requests where any of ``user_ids`` is a reviewer, newest first."""
        if not user_ids:
            return []
        reviewed = (
            select(ReviewerAssignment.pull_request_id)
            .where(ReviewerAssignment.user_id.in_(list(user_ids)))
        )
        result = await self.session.execute(
            select(PullRequest)
            .where(
                PullRequest.status == PRStatus.OPEN.value,
                PullRequest.pull_request_id.in_(reviewed),
            )
            .order_by(PullRequest.created_at.desc(), PullRequest.pull_request_id)
        )
        return list(result.scalars().all())

    async def list_by_reviewer(self, user_id: str) -> list[PullRequest]:
        """All pull requests where ``user_id`` is a reviewer, newest first."""
        result = await self.session.execute(
            select(PullRequest)
            .join(ReviewerAssignment)
            .where(ReviewerAssignment.user_id == user_id)
            .order_by(PullRequest.created_at.desc(), PullRequest.pull_request_id)
        )
        return list(result.scalars().all())

    async def list_recent(
        self, limit: int = 20, status: Optional[str] = None
    ) -> list[PullRequest]:
        query = select(PullRequest)
        if status:
            query = query.where(PullRequest.status == status)
        result = await self.session.execute(
            query.order_by(PullRequest.created_at.desc()).limit(limit)
        )
        return list(result.scalars().all())

    async def count(self, status: Optional[str] = None) -> int:
        query = select(func.count()).select_from(PullRequest)
        if status:
            query = query.where(PullRequest.status == status)
        result = await self.session.execute(query)
        return result.scalar_one()
