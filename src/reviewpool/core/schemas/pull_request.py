"""Pull request schemas"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PullRequestCreate(BaseModel):
    """Schema for opening a pull request."""
    pull_request_id: str = Field(..., min_length=1, max_length=255, description="Unique PR ID")
    pull_request_name: str = Field(..., min_length=1, max_length=500, description="PR title")
    author_id: str = Field(..., min_length=1, max_length=255, description="Author user ID")


class MergeRequest(BaseModel):
    """Schema for merging a pull request."""
    pull_request_id: str = Field(..., min_length=1, description="PR ID")


class ReassignRequest(BaseModel):
    """Schema for replacing one reviewer."""
    pull_request_id: str = Field(..., min_length=1, description="PR ID")
    old_user_id: str = Field(..., min_length=1, description="Reviewer to replace")


class PullRequestResponse(BaseModel):
    """Schema for pull request response."""
    pull_request_id: str
    pull_request_name: str
    author_id: str
    status: str
    assigned_reviewers: list[str]
    created_at: Optional[datetime] = Field(None, serialization_alias="createdAt")
    merged_at: Optional[datetime] = Field(None, serialization_alias="mergedAt")

    model_config = ConfigDict(from_attributes=True)


class PullRequestShort(BaseModel):
    """Schema for pull request list entries."""
    pull_request_id: str
    pull_request_name: str
    author_id: str
    status: str

    model_config = ConfigDict(from_attributes=True)


class PullRequestEnvelope(BaseModel):
    pr: PullRequestResponse


class ReassignResponse(BaseModel):
    pr: PullRequestResponse
    replaced_by: str
