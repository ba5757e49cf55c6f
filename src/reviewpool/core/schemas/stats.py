"""Statistics schemas"""
from pydantic import BaseModel, ConfigDict


class UserAssignmentCount(BaseModel):
    user_id: str
    username: str
    assignment_count: int

    model_config = ConfigDict(from_attributes=True)


class PRReviewerCount(BaseModel):
    pr_id: str
    pr_name: str
    reviewer_count: int

    model_config = ConfigDict(from_attributes=True)


class StatsResponse(BaseModel):
    """Schema for assignment statistics."""
    total_prs: int
    total_users: int
    average_reviewers_per_pr: float
    assignments_by_user: list[UserAssignmentCount]
    reviewers_per_pr: list[PRReviewerCount]

    model_config = ConfigDict(from_attributes=True)
