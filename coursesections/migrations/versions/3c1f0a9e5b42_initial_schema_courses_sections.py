"""Initial schema: courses, course_sections, course_format_options, tokens, grants

Revision ID: 3c1f0a9e5b42
Revises:
Create Date: 2026-10-19 09:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3c1f0a9e5b42"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Detect database type
    bind = op.get_bind()
    is_sqlite = bind.dialect.name == "sqlite"

    # Use appropriate timestamp defaults
    if is_sqlite:
        now_default = sa.text("(datetime('now'))")
        timestamp_type = sa.DateTime()
    else:
        now_default = sa.text("now()")
        timestamp_type = sa.DateTime(timezone=True)

    # Create courses table
    op.create_table(
        "courses",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("shortname", sa.String(length=255), nullable=False),
        sa.Column("fullname", sa.String(length=1333), nullable=False),
        sa.Column("format", sa.String(length=21), nullable=False),
        sa.Column("marker", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", timestamp_type, server_default=now_default, nullable=False),
        sa.Column("updated_at", timestamp_type, server_default=now_default, nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_courses_shortname"), "courses", ["shortname"], unique=False)

    # Create course_sections table
    op.create_table(
        "course_sections",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("course_id", sa.Integer(), nullable=False),
        sa.Column("section", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("summary", sa.Text(), nullable=False),
        sa.Column("summary_format", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("visible", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("availability", sa.Text(), nullable=True),
        sa.Column("sequence", sa.Text(), nullable=False),
        sa.Column("created_at", timestamp_type, server_default=now_default, nullable=False),
        sa.Column("updated_at", timestamp_type, server_default=now_default, nullable=False),
        sa.ForeignKeyConstraint(
            ["course_id"],
            ["courses.id"],
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("course_id", "section", name="uq_course_section_position"),
    )
    op.create_index(op.f("ix_course_sections_course_id"), "course_sections", ["course_id"], unique=False)

    # Create course_format_options table
    op.create_table(
        "course_format_options",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("course_id", sa.Integer(), nullable=False),
        sa.Column("format", sa.String(length=21), nullable=False),
        sa.Column("section_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("value", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(
            ["course_id"],
            ["courses.id"],
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["section_id"],
            ["course_sections.id"],
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("section_id", "format", "name", name="uq_section_format_option"),
    )
    op.create_index(op.f("ix_course_format_options_course_id"), "course_format_options", ["course_id"], unique=False)
    op.create_index(op.f("ix_course_format_options_section_id"), "course_format_options", ["section_id"], unique=False)

    # Create service_tokens table
    op.create_table(
        "service_tokens",
        sa.Column("token", sa.String(length=128), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("enabled", sa.Boolean(), nullable=False),
        sa.Column("created_at", timestamp_type, server_default=now_default, nullable=False),
        sa.Column("updated_at", timestamp_type, server_default=now_default, nullable=False),
        sa.PrimaryKeyConstraint("token"),
    )
    op.create_index(op.f("ix_service_tokens_user_id"), "service_tokens", ["user_id"], unique=False)

    # Create capability_grants table
    op.create_table(
        "capability_grants",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("course_id", sa.Integer(), nullable=True),
        sa.Column("capability", sa.String(length=255), nullable=False),
        sa.ForeignKeyConstraint(
            ["course_id"],
            ["courses.id"],
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "course_id", "capability", name="uq_capability_grant"),
    )
    op.create_index(op.f("ix_capability_grants_user_id"), "capability_grants", ["user_id"], unique=False)
    op.create_index(op.f("ix_capability_grants_course_id"), "capability_grants", ["course_id"], unique=False)


def downgrade() -> None:
    # Drop indexes
    op.drop_index(op.f("ix_capability_grants_course_id"), table_name="capability_grants")
    op.drop_index(op.f("ix_capability_grants_user_id"), table_name="capability_grants")
    op.drop_index(op.f("ix_service_tokens_user_id"), table_name="service_tokens")
    op.drop_index(op.f("ix_course_format_options_section_id"), table_name="course_format_options")
    op.drop_index(op.f("ix_course_format_options_course_id"), table_name="course_format_options")
    op.drop_index(op.f("ix_course_sections_course_id"), table_name="course_sections")
    op.drop_index(op.f("ix_courses_shortname"), table_name="courses")

    # Drop tables
    op.drop_table("capability_grants")
    op.drop_table("service_tokens")
    op.drop_table("course_format_options")
    op.drop_table("course_sections")
    op.drop_table("courses")
