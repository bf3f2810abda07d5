"""Pydantic schemas for person interest selections."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from affinity.schemas.interest import InterestRead


class PersonInterestItem(BaseModel):
    """One weighted interest in a replace request."""

    interest_id: int
    level: float = Field(ge=0.0, le=1.0)


class PersonInterestsUpdate(BaseModel):
    """Full replacement of a person's selections. An empty list clears them."""

    interests: list[PersonInterestItem]

    @field_validator("interests")
    @classmethod
    def unique_interests(cls, items: list[PersonInterestItem]) -> list[PersonInterestItem]:
        ids = [item.interest_id for item in items]
        if len(ids) != len(set(ids)):
            raise ValueError("Each interest may appear at most once")
        return items


class PersonInterestRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    person_id: int
    interest_id: int
    level: float
    created_at: datetime
    updated_at: datetime
    interest: InterestRead | None = None
