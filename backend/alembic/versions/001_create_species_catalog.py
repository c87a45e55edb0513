"""Create species catalog tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates `profiles`, `species` and `comment`.
How:   `comment` keeps the camelCase column names of the hosted schema
       ("speciesId", "authorId"); the ORM maps them to snake_case attributes.

Rollback: downgrade() drops all three tables (destructive, all data lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the three tables, their foreign keys and the listing indexes."""
    op.create_table(
        "profiles",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            nullable=False,
            comment="User id issued by the auth service",
        ),
        sa.Column(
            "display_name",
            sa.Text(),
            nullable=False,
            comment="Name shown next to species and comments",
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "species",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "scientific_name",
            sa.Text(),
            nullable=False,
            comment="Binomial name, e.g. 'Panthera leo'",
        ),
        sa.Column("common_name", sa.Text(), nullable=True),
        sa.Column(
            "kingdom",
            sa.String(20),
            nullable=False,
            comment="Animalia, Plantae, Fungi, Protista, Archaea or Bacteria",
        ),
        sa.Column("total_population", sa.BigInteger(), nullable=True),
        sa.Column(
            "endangered",
            sa.Boolean(),
            nullable=False,
            server_default=sa.text("false"),
        ),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("image", sa.Text(), nullable=True, comment="Public image URL"),
        sa.Column("author", postgresql.UUID(as_uuid=True), nullable=False),
        sa.ForeignKeyConstraint(["author"], ["profiles.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_species_author", "species", ["author"])

    op.create_table(
        "comment",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("speciesId", sa.Integer(), nullable=False),
        sa.Column("authorId", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("content", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(["speciesId"], ["species.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["authorId"], ["profiles.id"]),
        sa.PrimaryKeyConstraint("id"),
    )

    # Listing query: WHERE "speciesId" IN (...) ORDER BY id DESC
    op.create_index("idx_comment_species_id", "comment", ["speciesId", "id"])


def downgrade() -> None:
    """Drop all catalog tables, children first."""
    op.drop_index("idx_comment_species_id", table_name="comment")
    op.drop_table("comment")
    op.drop_index("idx_species_author", table_name="species")
    op.drop_table("species")
    op.drop_table("profiles")
