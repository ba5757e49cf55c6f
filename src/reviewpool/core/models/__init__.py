"""Core data models for teams, users, and pull requests."""
# Import all models to ensure relationships work correctly
from .team import Team
from .user import User
from .pull_request import PRStatus, PullRequest, ReviewerAssignment

__all__ = [
    "Team",
    "User",
    "PRStatus",
    "PullRequest",
    "ReviewerAssignment",
]
