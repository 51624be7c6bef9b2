"""Pydantic schemas for Direct API request/response validation."""

from pydantic import BaseModel, ConfigDict, Field

from direct_api.query.models import Challenge


class ChallengeListResponse(BaseModel):
    """A page of the caller's challenges."""

    challenges: list[Challenge] = Field(default_factory=list)


class ChallengeCountResponse(BaseModel):
    """Number of the caller's challenges matching the filters."""

    model_config = ConfigDict(populate_by_name=True)

    total_count: int = Field(..., alias="totalCount")


class ErrorResponse(BaseModel):
    """Standard error response."""

    error_code: str
    message: str
    remediation: str | None = None
    details: dict | None = None
