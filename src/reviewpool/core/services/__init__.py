"""Directory and reporting services around the assignment engine."""
from .directory import MemberSpec, TeamService, UserService
from .stats import AssignmentStats, PRReviewerStats, StatsService, UserAssignmentStats

__all__ = [
    "MemberSpec",
    "TeamService",
    "UserService",
    "AssignmentStats",
    "PRReviewerStats",
    "StatsService",
    "UserAssignmentStats",
]
