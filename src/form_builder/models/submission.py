"""SQLModel Submission model"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


class Submission(SQLModel, table=True):
    """Model for form submissions. Append-only."""

    __tablename__ = "submissions"

    id: str = Field(primary_key=True)
    # Not a foreign key: submissions are accepted for any form id
    form_id: str = Field(index=True)
    data: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))
    submitted_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
