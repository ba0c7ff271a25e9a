"""Field instance model, field patches and the FormField table"""

import copy
import uuid
from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from sqlalchemy import JSON, Column
from sqlalchemy import Enum as SQLEnum
from sqlmodel import Field, SQLModel

from form_builder.models.field_type import FieldType

# The only attributes a field patch may touch. id, type and order are not patchable.
PATCHABLE_ATTRIBUTES = ("label", "placeholder", "required", "options")


class FieldInstance(BaseModel):
    """One configured field placed on a form.

    Instances are immutable; every mutation produces a new instance through
    ``model_copy`` so the designer never shares state with an editor copy.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    type: FieldType
    label: str
    placeholder: Optional[str] = None
    required: bool = False
    options: Optional[List[str]] = None  # select and radio only
    order: int = 0

    def with_order(self, order: int) -> "FieldInstance":
        if order == self.order:
            return self
        return self.model_copy(update={"order": order})


class FieldPatch(BaseModel):
    """Partial set of mutable field attributes.

    Only keys that were explicitly set are applied.
    """

    label: Optional[str] = None
    placeholder: Optional[str] = None
    required: Optional[bool] = None
    options: Optional[List[str]] = None


def apply_field_patch(field: FieldInstance, patch: FieldPatch) -> FieldInstance:
    """Return a copy of ``field`` with exactly the patch's set keys replaced."""
    changes = patch.model_dump(exclude_unset=True)
    unknown = set(changes) - set(PATCHABLE_ATTRIBUTES)
    if unknown:
        raise ValueError(f"Cannot patch attributes: {sorted(unknown)}")
    return field.model_copy(update=copy.deepcopy(changes))


class FormField(SQLModel, table=True):
    """Stored row for one field of a saved form"""

    __tablename__ = "form_fields"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    form_id: str = Field(foreign_key="forms.id", ondelete="CASCADE", index=True)
    field_id: str = Field(index=True)  # Designer-assigned identifier
    field_type: FieldType = Field(
        sa_column=Column(
            SQLEnum(
                FieldType,
                name="form_field_type",
                values_callable=lambda x: [e.value for e in x],
            ),
            nullable=False,
        )
    )
    label: str
    placeholder: Optional[str] = None
    is_required: bool = Field(default=False)
    options: Optional[List[str]] = Field(
        default=None, sa_column=Column(JSON)
    )  # For select and radio fields
    field_order: int = Field(default=0)  # Display order
    position: int = Field(default=0)  # Index in the saved list

    @classmethod
    def from_instance(
        cls, form_id: str, instance: FieldInstance, position: int
    ) -> "FormField":
        return cls(
            form_id=form_id,
            field_id=instance.id,
            field_type=instance.type,
            label=instance.label,
            placeholder=instance.placeholder,
            is_required=instance.required,
            options=list(instance.options) if instance.options is not None else None,
            field_order=instance.order,
            position=position,
        )

    def to_instance(self) -> FieldInstance:
        return FieldInstance(
            id=self.field_id,
            type=self.field_type,
            label=self.label,
            placeholder=self.placeholder,
            required=self.is_required,
            options=list(self.options) if self.options is not None else None,
            order=self.field_order,
        )
