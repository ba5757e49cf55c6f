"""Shared candidate-pool and exclusion rules."""
from typing import Iterable, Optional

from ..models import PullRequest, User
from ..storage.repositories import UserRepository
from .selector import ReviewerSelector


def reviewer_exclusions(pull_request: PullRequest, *extra: Iterable[str]) -> set[str]:
    """Ids that may never fill a reviewer slot on ``pull_request``.

    Always the author and every current reviewer; ``extra`` widens the set,
    e.g. with the whole batch of users being deactivated.
    """
    excluded = {pull_request.author_id, *pull_request.assigned_reviewers}
    for ids in extra:
        excluded.update(ids)
    return excluded


def reviewers_among(pull_request: PullRequest, user_ids: Iterable[str]) -> list[str]:
    """Current reviewers of ``pull_request`` that appear in ``user_ids``, in slot order."""
    wanted = set(user_ids)
    return [user_id for user_id in pull_request.assigned_reviewers if user_id in wanted]


async def eligible_candidates(
    users: UserRepository, team_name: str, exclude: Iterable[str]
) -> list[User]:
    """Active members of ``team_name`` outside ``exclude``."""
    return await users.get_active_by_team(team_name, exclude_ids=exclude)


async def pick_replacement(
    users: UserRepository,
    selector: ReviewerSelector,
    pull_request: PullRequest,
    old_reviewer: User,
    extra_exclude: Iterable[str] = (),
) -> Optional[str]:
    """Choose one replacement for ``old_reviewer`` from their own team.

    Returns:
        The chosen user id, or None when nobody is eligible
    """
    exclude = reviewer_exclusions(pull_request, [old_reviewer.user_id], extra_exclude)
    pool = await eligible_candidates(users, old_reviewer.team_name, exclude)
    picked = selector.select(pool, 1)
    return picked[0] if picked else None
