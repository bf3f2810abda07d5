"""Initial schema for the interest affinity engine.

Creates:
- people: directory entries (soft-deletable)
- interests: catalog with stable, never-reused catalog positions
- person_interests: weighted selections, level in [0, 1]
- person_interest_vectors: derived sparse vectors, one row per person with interests

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # 1. people
    op.create_table(
        "people",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("display_id", sa.String(100), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("pronouns", sa.String(50)),
        sa.Column("deleted", sa.Boolean, server_default=sa.text("false"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_people_display_id", "people", ["display_id"], unique=True)
    op.create_index("ix_people_deleted", "people", ["deleted"])

    # 2. interests
    op.create_table(
        "interests",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("category", sa.String(100), nullable=False),
        sa.Column("catalog_position", sa.Integer, nullable=False),
        sa.Column("deleted", sa.Boolean, server_default=sa.text("false"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("catalog_position", name="uq_interests_catalog_position"),
    )
    op.create_index("ix_interests_category", "interests", ["category"])
    op.create_index("ix_interests_deleted", "interests", ["deleted"])
    op.create_index("idx_interests_name_category", "interests", ["name", "category"])

    # 3. person_interests
    op.create_table(
        "person_interests",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("person_id", sa.Integer, sa.ForeignKey("people.id", ondelete="CASCADE"), nullable=False),
        sa.Column("interest_id", sa.Integer, sa.ForeignKey("interests.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("level", sa.Numeric(3, 2), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("person_id", "interest_id", name="uq_person_interests_person_interest"),
        sa.CheckConstraint("level >= 0 AND level <= 1", name="ck_person_interests_level_range"),
    )
    op.create_index("ix_person_interests_person_id", "person_interests", ["person_id"])
    op.create_index("ix_person_interests_interest_id", "person_interests", ["interest_id"])

    # 4. person_interest_vectors
    op.create_table(
        "person_interest_vectors",
        sa.Column("person_id", sa.Integer, sa.ForeignKey("people.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("components", JSONB, server_default=sa.text("'{}'::jsonb"), nullable=False),
        sa.Column("dimension", sa.Integer, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("person_interest_vectors")
    op.drop_index("ix_person_interests_interest_id", table_name="person_interests")
    op.drop_index("ix_person_interests_person_id", table_name="person_interests")
    op.drop_table("person_interests")
    op.drop_index("idx_interests_name_category", table_name="interests")
    op.drop_index("ix_interests_deleted", table_name="interests")
    op.drop_index("ix_interests_category", table_name="interests")
    op.drop_table("interests")
    op.drop_index("ix_people_deleted", table_name="people")
    op.drop_index("ix_people_display_id", table_name="people")
    op.drop_table("people")
