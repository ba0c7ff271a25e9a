"""Form table and the form definition read/write models"""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel
from sqlmodel import Field, SQLModel

from form_builder.models.form_field import FieldInstance


class Form(SQLModel, table=True):
    """Saved form definition header. Fields live in ``form_fields``."""

    __tablename__ = "forms"

    id: str = Field(primary_key=True)
    title: str
    description: Optional[str] = None
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    updated_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )


class FormDefinition(BaseModel):
    """A form as handed to the designer, the renderer and API callers"""

    id: str
    title: str
    description: Optional[str] = None
    fields: List[FieldInstance] = []
    created_at: datetime
    updated_at: datetime

    def ordered_fields(self) -> List[FieldInstance]:
        return sorted(self.fields, key=lambda f: f.order)


class FormDraft(BaseModel):
    """Payload for creating a form"""

    title: str
    description: Optional[str] = None
    fields: List[FieldInstance] = []


class FormUpdate(BaseModel):
    """Partial update payload; keys left out keep their stored values"""

    title: Optional[str] = None
    description: Optional[str] = None
    fields: Optional[List[FieldInstance]] = None
