"""Read-only assignment statistics."""
from dataclasses import dataclass, field

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import PullRequest, ReviewerAssignment, User


@dataclass
class UserAssignmentStats:
    user_id: str
    username: str
    assignment_count: int


@dataclass
class PRReviewerStats:
    pr_id: str
    pr_name: str
    reviewer_count: int


@dataclass
class AssignmentStats:
    total_prs: int
    total_users: int
    average_reviewers_per_pr: float
    assignments_by_user: list[UserAssignmentStats] = field(default_factory=list)
    reviewers_per_pr: list[PRReviewerStats] = field(default_factory=list)


class StatsService:
    """Aggregates counts straight from the stored assignments."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_stats(self) -> AssignmentStats:
        total_prs = (
            await self.session.execute(select(func.count()).select_from(PullRequest))
        ).scalar_one()
        total_users = (
            await self.session.execute(select(func.count()).select_from(User))
        ).scalar_one()

        # Average over PRs that have at least one reviewer
        per_pr = (
            select(func.count().label("reviewer_count"))
            .select_from(ReviewerAssignment)
            .group_by(ReviewerAssignment.pull_request_id)
            .subquery()
        )
        average = (
            await self.session.execute(select(func.avg(per_pr.c.reviewer_count)))
        ).scalar()

        assignment_count = func.count(ReviewerAssignment.id).label("assignment_count")
        by_user = await self.session.execute(
            select(User.user_id, User.username, assignment_count)
            .outerjoin(ReviewerAssignment, ReviewerAssignment.user_id == User.user_id)
            .group_by(User.user_id, User.username)
            .order_by(assignment_count.desc(), User.user_id)
        )

        reviewer_count = func.count(ReviewerAssignment.id).label("reviewer_count")
        by_pr = await self.session.execute(
            select(PullRequest.pull_request_id, PullRequest.pull_request_name, reviewer_count)
            .outerjoin(
                ReviewerAssignment,
                ReviewerAssignment.pull_request_id == PullRequest.pull_request_id,
            )
            .group_by(PullRequest.pull_request_id, PullRequest.pull_request_name)
            .order_by(reviewer_count.desc(), PullRequest.pull_request_id)
        )

        return AssignmentStats(
            total_prs=total_prs,
            total_users=total_users,
            average_reviewers_per_pr=float(average or 0.0),
            assignments_by_user=[
                UserAssignmentStats(user_id=row[0], username=row[1], assignment_count=row[2])
                for row in by_user.all()
            ],
            reviewers_per_pr=[
                PRReviewerStats(pr_id=row[0], pr_name=row[1], reviewer_count=row[2])
                for row in by_pr.all()
            ],
        )
