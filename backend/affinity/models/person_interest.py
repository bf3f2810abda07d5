"""Person interest selection: one weighted interest per (person, interest)."""

from sqlalchemy import Column, Integer, Numeric, ForeignKey, CheckConstraint, UniqueConstraint
from sqlalchemy.orm import relationship

from affinity.models.base import Base, IdMixin, TimestampMixin


class PersonInterest(IdMixin, TimestampMixin, Base):
    __tablename__ = "person_interests"

    person_id = Column(Integer, ForeignKey("people.id", ondelete="CASCADE"), nullable=False, index=True)
    interest_id = Column(Integer, ForeignKey("interests.id", ondelete="RESTRICT"), nullable=False, index=True)
    level = Column(Numeric(3, 2), nullable=False)  # 0.00 - 1.00

    # Relationships
    person = relationship("Person", back_populates="interests")
    interest = relationship("Interest")

    __table_args__ = (
        UniqueConstraint("person_id", "interest_id", name="uq_person_interests_person_interest"),
        CheckConstraint("level >= 0 AND level <= 1", name="ck_person_interests_level_range"),
    )
