"""
RateLimitCounter Entity

Fixed-window attempt counter for one (action, identifier) pair.
"""

from datetime import datetime

from sqlmodel import Column, DateTime, Field, Index, SQLModel


class RateLimitCounter(SQLModel, table=True):
    """
    RateLimitCounter entity - ephemeral attempt counter.

    Business Rules:
    - Keyed by (action, identifier); identifier is a normalised email, IP or user id
    - A window that has closed is restarted by the next failed attempt
    - Successful attempts delete the row
    """

    __tablename__ = "rate_limit_counters"

    action: str = Field(primary_key=True, max_length=64)
    identifier: str = Field(primary_key=True, max_length=255)

    attempts: int = Field(default=0)
    window_start: datetime = Field(sa_column=Column(DateTime, nullable=False))

    __table_args__ = (Index("idx_rate_limit_window_start", "window_start"),)
