"""
HotOrNot Backend — Vote SQLAlchemy Model
==========================================

What:  ORM model for the `votes` table, the append-only vote ledger.
Who:   Appended to by the voting flow; read when auditing image tallies.

Table Design:
    - value is constrained to 'hot' / 'not' by a CHECK constraint
    - image_id references images.id without cascades: the ledger never owns
      or deletes an image
    - index on image_id serves per-image tallies
    - created_at is timezone-aware and defaults to the insert time
"""

from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column

from hotornot.database import Base

VOTE_VALUES = ("hot", "not")


class Vote(Base):
    """One user's binary judgment on one image. Immutable once written."""

    __tablename__ = "votes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    image_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("images.id"),
        nullable=False,
        comment="Image this vote was cast for",
    )

    value: Mapped[str] = mapped_column(
        String(8),
        nullable=False,
        comment="Either 'hot' or 'not'",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
        comment="When the vote was cast (UTC)",
    )

    __table_args__ = (
        CheckConstraint("value IN ('hot', 'not')", name="ck_votes_value"),
        Index("idx_votes_image_id", "image_id"),
        {"sqlite_autoincrement": True},
    )

    def __repr__(self) -> str:
        return f"<Vote(id={self.id}, image_id={self.image_id}, value='{self.value}')>"
