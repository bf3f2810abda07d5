"""Pydantic schemas package."""

from affinity.schemas.interest import (
    CategoryChange,
    CategoryRename,
    InterestBase,
    InterestCreate,
    InterestRead,
    InterestUpdate,
)
from affinity.schemas.person_interest import (
    PersonInterestItem,
    PersonInterestsUpdate,
    PersonInterestRead,
)
from affinity.schemas.recommendation import (
    RecommendationRead,
    RecommendationsResponse,
)

__all__ = [
    # Interest
    "InterestBase",
    "InterestCreate",
    "InterestRead",
    "InterestUpdate",
    "CategoryRename",
    "CategoryChange",
    # PersonInterest
    "PersonInterestItem",
    "PersonInterestsUpdate",
    "PersonInterestRead",
    # Recommendation
    "RecommendationRead",
    "RecommendationsResponse",
]
