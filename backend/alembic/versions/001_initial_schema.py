"""Initial schema: users, movies, seats and the bookings ledger.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("username", sa.String(100), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    op.create_table(
        "movies",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.String(1000), nullable=True),
        sa.Column("duration", sa.Integer(), nullable=False),
        sa.Column("genre", sa.String(50), nullable=False),
        sa.Column("language", sa.String(50), nullable=False),
        sa.Column("rating", sa.String(10), nullable=False),
        sa.Column("poster_url", sa.String(500), nullable=True),
        sa.Column("ticket_price", sa.Float(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("duration > 0", name="check_movie_duration_positive"),
        sa.CheckConstraint("ticket_price >= 0", name="check_movie_price_non_negative"),
    )
    op.create_index("ix_movies_id", "movies", ["id"])
    op.create_index("ix_movies_genre_language", "movies", ["genre", "language"])

    op.create_table(
        "seats",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("movie_id", sa.Integer(), sa.ForeignKey("movies.id", ondelete="CASCADE"), nullable=False),
        sa.Column("seat_number", sa.String(20), nullable=False),
        sa.Column("row_name", sa.String(10), nullable=False),
        sa.Column("seat_in_row", sa.Integer(), nullable=False),
        sa.Column("is_available", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("seat_type", sa.String(20), nullable=False, server_default=sa.text("'Regular'")),
        sa.Column("additional_price", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.UniqueConstraint("movie_id", "seat_number", name="uq_seats_movie_seat_number"),
        sa.CheckConstraint("seat_in_row > 0", name="check_seat_in_row_positive"),
        sa.CheckConstraint("additional_price >= 0", name="check_seat_price_non_negative"),
    )
    op.create_index("ix_seats_id", "seats", ["id"])
    op.create_index("ix_seats_movie_id", "seats", ["movie_id"])

    # Bookings ledger. The (movie_id, seat_label) unique constraint is the
    # only guard against double booking; do not drop or relax it.
    # movie_id has no foreign key: the catalog is another service.
    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("movie_id", sa.BigInteger(), nullable=False),
        sa.Column("seat_label", sa.String(20), nullable=False),
        sa.Column("username", sa.String(100), nullable=False),
        sa.Column("booked_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("movie_id", "seat_label", name="uq_bookings_movie_seat"),
        sa.CheckConstraint("movie_id > 0", name="check_booking_movie_id_positive"),
    )
    op.create_index("ix_bookings_username", "bookings", ["username"])


def downgrade() -> None:
    op.drop_table("bookings")
    op.drop_table("seats")
    op.drop_table("movies")
    op.drop_table("users")
