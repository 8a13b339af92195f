"""
HotOrNot Backend — Image SQLAlchemy Model
===========================================

What:  ORM model representing the `images` table.
How:   Inherits from the shared DeclarativeBase; Alembic reads this for migrations.
Who:   Written by the upload flow, counters bumped by the voting flow, read by
       listing and ranking.

Table Design:
    - Integer primary key with AUTOINCREMENT on SQLite: ids only grow and are
      never reused, so insertion order == id order
    - filename: name of the stored file inside the upload directory
    - url: public path the stored file is served from
    - total_votes / hot_votes: denormalised tallies of the votes table
    - CHECK constraint keeps 0 <= hot_votes <= total_votes in the database
      itself, not only in application code
"""

from sqlalchemy import CheckConstraint, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column

from hotornot.database import Base


class Image(Base):
    """
    An uploaded file plus its vote aggregates.

    Lifecycle:
        1. Created by the upload flow with both counters at 0
        2. Counters incremented atomically, one vote at a time
        3. Never deleted
    """

    __tablename__ = "images"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    filename: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Name of the stored file inside the upload directory",
    )

    url: Mapped[str] = mapped_column(
        String(512),
        nullable=False,
        comment="Public path of the stored file",
    )

    # Only ever changed through `SET x = x + 1` style UPDATEs
    total_votes: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default=text("0"),
        comment="Number of votes cast for this image",
    )

    hot_votes: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default=text("0"),
        comment="Number of 'hot' votes cast for this image",
    )

    __table_args__ = (
        CheckConstraint(
            "hot_votes >= 0 AND hot_votes <= total_votes",
            name="ck_images_vote_counts",
        ),
        {"sqlite_autoincrement": True},
    )

    def __repr__(self) -> str:
        return (
            f"<Image(id={self.id}, filename='{self.filename}', "
            f"hot={self.hot_votes}/{self.total_votes})>"
        )
