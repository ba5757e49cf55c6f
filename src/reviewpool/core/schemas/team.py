"""Team schemas"""
from pydantic import BaseModel, ConfigDict, Field


class TeamMember(BaseModel):
    """Schema for a team roster entry."""
    user_id: str = Field(..., min_length=1, max_length=255, description="User ID")
    username: str = Field(..., min_length=1, max_length=255, description="Display name")
    is_active: bool = Field(default=True, description="Whether the user can be assigned reviews")

    model_config = ConfigDict(from_attributes=True)


class TeamCreate(BaseModel):
    """Schema for creating a team with its members."""
    team_name: str = Field(..., min_length=1, max_length=255, description="Unique team name")
    members: list[TeamMember] = Field(default_factory=list, description="Team roster")


class TeamResponse(BaseModel):
    """Schema for team response."""
    team_name: str
    members: list[TeamMember]

    model_config = ConfigDict(from_attributes=True)


class TeamEnvelope(BaseModel):
    team: TeamResponse
