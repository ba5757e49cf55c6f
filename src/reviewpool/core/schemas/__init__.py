"""Pydantic schemas for API validation and serialization."""
from .errors import ErrorDetail, ErrorResponse
from .pull_request import (
    MergeRequest,
    PullRequestCreate,
    PullRequestEnvelope,
    PullRequestResponse,
    PullRequestShort,
    ReassignRequest,
    ReassignResponse,
)
from .stats import PRReviewerCount, StatsResponse, UserAssignmentCount
from .team import TeamCreate, TeamEnvelope, TeamMember, TeamResponse
from .user import (
    BulkDeactivateRequest,
    BulkDeactivateResponse,
    SetIsActiveRequest,
    SlotOutcomeResponse,
    UserEnvelope,
    UserResponse,
    UserReviews,
)

__all__ = [
    # Error schemas
    "ErrorDetail",
    "ErrorResponse",
    # Pull request schemas
    "MergeRequest",
    "PullRequestCreate",
    "PullRequestEnvelope",
    "PullRequestResponse",
    "PullRequestShort",
    "ReassignRequest",
    "ReassignResponse",
    # Statistics schemas
    "PRReviewerCount",
    "StatsResponse",
    "UserAssignmentCount",
    # Team schemas
    "TeamCreate",
    "TeamEnvelope",
    "TeamMember",
    "TeamResponse",
    # User schemas
    "BulkDeactivateRequest",
    "BulkDeactivateResponse",
    "SetIsActiveRequest",
    "SlotOutcomeResponse",
    "UserEnvelope",
    "UserResponse",
    "UserReviews",
]
