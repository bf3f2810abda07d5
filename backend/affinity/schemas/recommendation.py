"""Pydantic schemas for similar-person recommendations."""

from typing import Literal

from pydantic import BaseModel


class RecommendationRead(BaseModel):
    person_id: int
    display_id: str
    first_name: str
    last_name: str
    pronouns: str | None = None
    similarity: float


class RecommendationsResponse(BaseModel):
    """Recommendations for a person.

    status is "no_interests" when the person has not selected any interests
    yet, so the client can prompt for some instead of showing "no matches".
    """

    person_id: int
    status: Literal["ok", "no_interests"]
    items: list[RecommendationRead] = []
