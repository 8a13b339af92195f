"""
HotOrNot Backend — Vote Schemas
=================================

What:  Request/response models for POST /api/vote/{id}.

Why `vote` accepts any JSON value here:
    A missing, misspelled or non-string value is a business-rule failure
    (InvalidVoteError, 400 with a vote-specific message), not a schema
    failure. The voting service owns the allowed set.
"""

from typing import Any

from pydantic import BaseModel, Field


class VoteRequest(BaseModel):
    vote: Any = Field(default=None, description="Either 'hot' or 'not'")


class VoteResponse(BaseModel):
    success: bool = Field(default=True, description="Acknowledgement of the recorded vote")


class VoteTally(BaseModel):
    """Counts derived from the vote ledger for one image."""
    image_id: int
    total: int = 0
    hot: int = 0
