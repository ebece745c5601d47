"""Initial schema: users, properties, bookings, invitation codes, posts.

Revision ID: 001
Revises: None
Create Date: 2025-10-07
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("username", sa.String(256), nullable=False),
        sa.Column("email", sa.String(256), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False, server_default=""),
        sa.Column("last_name", sa.String(100), nullable=False, server_default=""),
        sa.Column("phone_number", sa.String(50), nullable=False, server_default=""),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        *_timestamps(),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "properties",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("booking_version", sa.Integer(), nullable=False, server_default=sa.text("1")),
    )
    op.create_index("ix_properties_id", "properties", ["id"])

    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("property_id", sa.Integer(), sa.ForeignKey("properties.id"), nullable=False),
        sa.Column("user_id", sa.String(256), sa.ForeignKey("users.username"), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("expected_people", sa.Integer(), nullable=False, server_default=sa.text("1")),
        *_timestamps(),
        sa.CheckConstraint("start_date < end_date", name="check_booking_dates_ordered"),
        sa.CheckConstraint(
            "expected_people >= 1 AND expected_people <= 20",
            name="check_booking_expected_people",
        ),
    )
    op.create_index("ix_bookings_id", "bookings", ["id"])
    op.create_index("ix_bookings_user_id", "bookings", ["user_id"])
    op.create_index("ix_bookings_property_start", "bookings", ["property_id", "start_date"])

    # NO OVERLAPPING STAYS PER PROPERTY.
    # The service already serializes booking inserts per property through
    # properties.booking_version; this makes the database refuse an overlap
    # even if a writer bypasses the service. '[)' matches the half-open
    # semantics: a stay ending on the 5th may touch one starting on the 5th.
    op.execute("CREATE EXTENSION IF NOT EXISTS btree_gist")
    op.execute(
        "ALTER TABLE bookings ADD CONSTRAINT ex_bookings_no_overlap "
        "EXCLUDE USING gist (property_id WITH =, daterange(start_date, end_date, '[)') WITH &&)"
    )

    op.create_table(
        "invitation_codes",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("code", sa.String(50), nullable=False),
        sa.Column("created_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("expiry_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("is_used", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("used_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("used_by_user_id", sa.String(36), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("created_by_user_id", sa.String(36), sa.ForeignKey("users.id"), nullable=True),
    )
    op.create_index("ix_invitation_codes_id", "invitation_codes", ["id"])
    op.create_index("ix_invitation_codes_code", "invitation_codes", ["code"], unique=True)
    op.create_index("ix_invitation_codes_created_by_user_id", "invitation_codes", ["created_by_user_id"])

    op.create_table(
        "posts",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("author_id", sa.String(36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("author_name", sa.String(255), nullable=False, server_default=""),
        *_timestamps(),
    )
    op.create_index("ix_posts_id", "posts", ["id"])


def downgrade() -> None:
    op.drop_table("posts")
    op.drop_table("invitation_codes")
    op.drop_table("bookings")
    op.drop_table("properties")
    op.drop_table("users")
