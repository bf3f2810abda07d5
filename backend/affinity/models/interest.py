"""Interest catalog model: each interest owns a stable vector position."""

from sqlalchemy import Column, String, Integer, Boolean, Index, false

from affinity.models.base import Base, IdMixin, TimestampMixin


class Interest(IdMixin, TimestampMixin, Base):
    __tablename__ = "interests"

    name = Column(String(100), nullable=False)
    category = Column(String(100), nullable=False, index=True)

    # Dense, assigned once at creation, never reused (soft delete keeps the slot)
    catalog_position = Column(Integer, unique=True, nullable=False)

    deleted = Column(Boolean, default=False, server_default=false(), nullable=False, index=True)

    __table_args__ = (
        Index("idx_interests_name_category", "name", "category"),
    )
