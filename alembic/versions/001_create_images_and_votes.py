"""Create images and votes tables

Revision ID: 001
Revises: None
Create Date: 2024-06-10 00:00:00.000000+00:00

What:  Creates the `images` table (uploads + vote tallies) and the `votes`
       ledger.

Rollback: downgrade() drops both tables (destructive, all votes lost).
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
        "images",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "filename",
            sa.String(255),
            nullable=False,
            comment="Name of the stored file inside the upload directory",
        ),
        sa.Column(
            "url",
            sa.String(512),
            nullable=False,
            comment="Public path of the stored file",
        ),
        sa.Column(
            "total_votes",
            sa.Integer(),
            nullable=False,
            server_default=sa.text("0"),
            comment="Number of votes cast for this image",
        ),
        sa.Column(
            "hot_votes",
            sa.Integer(),
            nullable=False,
            server_default=sa.text("0"),
            comment="Number of 'hot' votes cast for this image",
        ),
        sa.CheckConstraint(
            "hot_votes >= 0 AND hot_votes <= total_votes",
            name="ck_images_vote_counts",
        ),
        sa.PrimaryKeyConstraint("id"),
        sqlite_autoincrement=True,
    )

    op.create_table(
        "votes",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "image_id",
            sa.Integer(),
            nullable=False,
            comment="Image this vote was cast for",
        ),
        sa.Column(
            "value",
            sa.String(8),
            nullable=False,
            comment="Either 'hot' or 'not'",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="When the vote was cast (UTC)",
        ),
        sa.CheckConstraint("value IN ('hot', 'not')", name="ck_votes_value"),
        sa.ForeignKeyConstraint(["image_id"], ["images.id"]),
        sa.PrimaryKeyConstraint("id"),
        sqlite_autoincrement=True,
    )

    op.create_index("idx_votes_image_id", "votes", ["image_id"])


def downgrade() -> None:
    op.drop_index("idx_votes_image_id", table_name="votes")
    op.drop_table("votes")
    op.drop_table("images")
