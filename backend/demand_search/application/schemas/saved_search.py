"""Pydantic DTOs for saved searches."""

from datetime import datetime

from pydantic import BaseModel, Field

from .query import CriterionSchema


class SavedSearchCreate(BaseModel):
    """Save either a raw query string or a list of criteria compiled server-side."""

    name: str = Field(..., examples=["Beverages in Retail"])
    query: str | None = Field(None, examples=['businessunit:*Beverages* AND channelid:*RET*'])
    criteria: list[CriterionSchema] = Field(default_factory=list)


class SavedSearchResponse(BaseModel):
    """Schema returned to the client."""

    id: int | None = None
    name: str
    query: str
    created_at: datetime | None = None

    model_config = {"from_attributes": True}
