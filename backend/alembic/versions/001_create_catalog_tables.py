"""Create catalog tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates authors, genres, books, book_genres and book_instances.
How:   References (books.author_id, book_instances.book_id, book_genres)
       are plain indexed id columns without foreign key constraints:
       deletes never cascade and never block, and readers tolerate
       dangling ids. Text columns are unbounded: they hold HTML-escaped
       input, which is longer than what was typed.

Rollback: downgrade() drops all five tables (destructive).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "authors",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("first_name", sa.Text(), nullable=False),
        sa.Column("family_name", sa.Text(), nullable=False),
        sa.Column("date_of_birth", sa.Date(), nullable=True),
        sa.Column("date_of_death", sa.Date(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_authors_family_name", "authors", ["family_name"])

    op.create_table(
        "genres",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_genres_name", "genres", ["name"])

    op.create_table(
        "books",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("summary", sa.Text(), nullable=False),
        sa.Column("isbn", sa.Text(), nullable=False),
        sa.Column("author_id", sa.Uuid(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_books_title", "books", ["title"])
    op.create_index("ix_books_author_id", "books", ["author_id"])

    op.create_table(
        "book_genres",
        sa.Column("book_id", sa.Uuid(), nullable=False),
        sa.Column("genre_id", sa.Uuid(), nullable=False),
        sa.PrimaryKeyConstraint("book_id", "genre_id"),
    )
    op.create_index("ix_book_genres_genre_id", "book_genres", ["genre_id"])

    # status holds the InstanceStatus value: Available, Maintenance, Loaned, Reserved
    op.create_table(
        "book_instances",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("book_id", sa.Uuid(), nullable=False),
        sa.Column("imprint", sa.Text(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("due_back", sa.Date(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_book_instances_book_id", "book_instances", ["book_id"])
    op.create_index("ix_book_instances_status", "book_instances", ["status"])


def downgrade() -> None:
    op.drop_index("ix_book_instances_status", table_name="book_instances")
    op.drop_index("ix_book_instances_book_id", table_name="book_instances")
    op.drop_table("book_instances")
    op.drop_index("ix_book_genres_genre_id", table_name="book_genres")
    op.drop_table("book_genres")
    op.drop_index("ix_books_author_id", table_name="books")
    op.drop_index("ix_books_title", table_name="books")
    op.drop_table("books")
    op.drop_index("ix_genres_name", table_name="genres")
    op.drop_table("genres")
    op.drop_index("ix_authors_family_name", table_name="authors")
    op.drop_table("authors")
