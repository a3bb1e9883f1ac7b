"""Pydantic schemas shared by all modules."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class TimestampSchema(BaseModel):
    """Creation and last-modification times of a stored row."""

    created_at: Optional[datetime] = Field(default=None, description="When the row was created (UTC)")
    updated_at: Optional[datetime] = Field(default=None, description="When the row was last modified (UTC)")
