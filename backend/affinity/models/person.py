"""Person model: the directory entry that owns interest selections and a vector."""

from sqlalchemy import Column, String, Boolean, false
from sqlalchemy.orm import relationship

from affinity.models.base import Base, IdMixin, TimestampMixin


class Person(IdMixin, TimestampMixin, Base):
    __tablename__ = "people"

    display_id = Column(String(100), unique=True, nullable=False, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    pronouns = Column(String(50))
    deleted = Column(Boolean, default=False, server_default=false(), nullable=False, index=True)

    # Relationships
    interests = relationship("PersonInterest", back_populates="person", cascade="all, delete-orphan")
    interest_vector = relationship(
        "PersonInterestVector", back_populates="person", uselist=False, cascade="all, delete-orphan",
    )
