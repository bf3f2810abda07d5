"""Derived interest vector: one row per person, absent when the person has no interests."""

from sqlalchemy import Column, Integer, JSON, ForeignKey
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship

from affinity.models.base import Base, TimestampMixin


class PersonInterestVector(TimestampMixin, Base):
    __tablename__ = "person_interest_vectors"

    person_id = Column(Integer, ForeignKey("people.id", ondelete="CASCADE"), primary_key=True)

    # Sparse components: JSON dict mapping str(catalog_position) → level (0.0, 1.0]
    components = Column(JSON().with_variant(JSONB, "postgresql"), nullable=False, default=dict)
    dimension = Column(Integer, nullable=False)

    # Relationships
    person = relationship("Person", back_populates="interest_vector")
