"""Team and user directory operations."""
import logging
from dataclasses import dataclass
from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import TeamExistsError, TeamNotFoundError, UserNotFoundError
from ..models import PullRequest, Team, User
from ..storage.repositories import PullRequestRepository, TeamRepository, UserRepository

logger = logging.getLogger(__name__)


@dataclass
class MemberSpec:
    """A user entry submitted as part of a team roster."""
    user_id: str
    username: str
    is_active: bool = True


class TeamService:
    """Creates teams and reads their rosters."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.teams = TeamRepository(session)
        self.users = UserRepository(session)

    async def create_team(self, team_name: str, members: Sequence[MemberSpec]) -> Team:
        """Create a team and upsert its members.

        Existing users listed as members move to the new team.

        Raises:
            TeamExistsError: If the team already exists
        """
        if await self.teams.exists(team_name):
            raise TeamExistsError()

        await self.teams.create(team_name)
        for member in members:
            await self.users.upsert(
                user_id=member.user_id,
                username=member.username,
                team_name=team_name,
                is_active=member.is_active,
            )
        await self.session.commit()
        logger.info("Created team %s with %d members", team_name, len(members))

        return await self.get_team(team_name)

    async def get_team(self, team_name: str) -> Team:
        team = await self.teams.get(team_name)
        if team is None:
            raise TeamNotFoundError()
        return team


class UserService:
    """Single-user directory operations."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.users = UserRepository(session)
        self.pull_requests = PullRequestRepository(session)

    async def get_user(self, user_id: str) -> User:
        user = await self.users.get(user_id)
        if user is None:
            raise UserNotFoundError()
        return user

    async def set_is_active(self, user_id: str, is_active: bool) -> User:
        """Toggle a user's active flag. Existing review slots are left as they are.

        Raises:
            UserNotFoundError: If the user does not exist
        """
        user = await self.users.set_active(user_id, is_active)
        if user is None:
            raise UserNotFoundError()
        await self.session.commit()
        logger.info("User %s is_active=%s", user_id, is_active)
        return user

    async def get_reviews(self, user_id: str) -> list[PullRequest]:
        """Pull requests where ``user_id`` is a reviewer, newest first.

        Raises:
            UserNotFoundError: If the user does not exist
        """
        await self.get_user(user_id)
        return await self.pull_requests.list_by_reviewer(user_id)
