"""User schemas"""
from pydantic import BaseModel, ConfigDict, Field

from .pull_request import PullRequestShort


class UserResponse(BaseModel):
    """Schema for user response."""
    user_id: str
    username: str
    team_name: str
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


class UserEnvelope(BaseModel):
    user: UserResponse


class SetIsActiveRequest(BaseModel):
    """Schema for toggling a user's active flag."""
    user_id: str = Field(..., min_length=1, description="User ID")
    is_active: bool = Field(..., description="New active flag")


class UserReviews(BaseModel):
    """Pull requests a user is reviewing."""
    user_id: str
    pull_requests: list[PullRequestShort]


class BulkDeactivateRequest(BaseModel):
    """Schema for deactivating several members of one team."""
    team_name: str = Field(..., min_length=1, description="Team the users belong to")
    user_ids: list[str] = Field(..., description="Users to deactivate")


class SlotOutcomeResponse(BaseModel):
    """What happened to one reviewer slot during bulk deactivation."""
    pull_request_id: str
    old_reviewer_id: str
    status: str
    new_reviewer_id: str | None = None
    detail: str | None = None

    model_config = ConfigDict(from_attributes=True)


class BulkDeactivateResponse(BaseModel):
    team_name: str
    deactivated_users: list[str]
    reassignments: list[SlotOutcomeResponse]
    duration_ms: int
