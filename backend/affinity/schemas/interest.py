"""Pydantic schemas for the interest catalog."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class InterestBase(BaseModel):
    """Base fields for interest."""

    name: str = Field(min_length=1, max_length=100)
    category: str = Field(min_length=1, max_length=100)


class InterestCreate(InterestBase):
    """Fields for creating an interest. The catalog position is assigned by the server."""


class InterestRead(InterestBase):
    """Full interest output."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    catalog_position: int
    created_at: datetime
    updated_at: datetime


class InterestUpdate(InterestBase):
    """Fields for renaming or recategorizing an interest."""


class CategoryRename(BaseModel):
    new_name: str = Field(min_length=1, max_length=100)


class CategoryChange(BaseModel):
    """Result of a category-wide rename or delete."""

    category: str
    interest_count: int
