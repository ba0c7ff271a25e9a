"""Working copy of the form being edited in the designer"""

import logging
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel

from form_builder.exceptions import DesignerInvariantError, ValidationFailure
from form_builder.models.field_registry import get_field_spec
from form_builder.models.field_type import FieldType
from form_builder.models.form import FormDefinition, FormDraft, FormUpdate
from form_builder.models.form_field import FieldInstance
from form_builder.utils.id_generator import default_field_id_generator

logger = logging.getLogger(__name__)

DEFAULT_FORM_TITLE = "New Form"
TITLE_REQUIRED_MESSAGE = "Please enter a form title"


class DesignerSnapshot(BaseModel):
    """Serializable copy of a designer's state"""

    form_id: Optional[str] = None
    title: str = DEFAULT_FORM_TITLE
    description: str = ""
    fields: List[FieldInstance] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class DesignerState:
    """
    Single source of truth for the form being edited.

    Every operation except ``save`` is an in-memory mutation. ``save`` hands
    the form to the gateway (``create_form`` / ``update_form``), which is
    usually a FormService.
    """

    def __init__(
        self,
        gateway=None,
        id_generator=None,
        form_id: Optional[str] = None,
        title: str = DEFAULT_FORM_TITLE,
        description: str = "",
        fields: Optional[List[FieldInstance]] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ):
        self.gateway = gateway
        self.id_generator = id_generator or default_field_id_generator
        self.form_id = form_id
        self.title = title
        self.description = description
        self._fields: List[FieldInstance] = list(fields or [])
        self.created_at = created_at
        self.updated_at = updated_at

    @classmethod
    def from_form(
        cls, form: FormDefinition, gateway=None, id_generator=None
    ) -> "DesignerState":
        """Open a designer on a fetched form definition"""
        return cls(
            gateway=gateway,
            id_generator=id_generator,
            form_id=form.id,
            title=form.title,
            description=form.description or "",
            fields=form.ordered_fields(),
            created_at=form.created_at,
            updated_at=form.updated_at,
        )

    @classmethod
    def from_snapshot(
        cls, snapshot: DesignerSnapshot, gateway=None, id_generator=None
    ) -> "DesignerState":
        return cls(
            gateway=gateway,
            id_generator=id_generator,
            form_id=snapshot.form_id,
            title=snapshot.title,
            description=snapshot.description,
            fields=snapshot.fields,
            created_at=snapshot.created_at,
            updated_at=snapshot.updated_at,
        )

    def snapshot(self) -> DesignerSnapshot:
        return DesignerSnapshot(
            form_id=self.form_id,
            title=self.title,
            description=self.description,
            fields=list(self._fields),
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    @property
    def fields(self) -> List[FieldInstance]:
        return list(self._fields)

    def get_field(self, field_id: str) -> Optional[FieldInstance]:
        index = self._index_of(field_id)
        return self._fields[index] if index != -1 else None

    def _index_of(self, field_id: str) -> int:
        for index, field in enumerate(self._fields):
            if field.id == field_id:
                return index
        return -1

    def insert_field(self, field_type: FieldType) -> FieldInstance:
        """Append a new field built from the registry defaults for ``field_type``"""
        spec = get_field_spec(field_type)
        field_id = self.id_generator.new_id(spec.field_type.value)
        if self._index_of(field_id) != -1:
            raise DesignerInvariantError(f"Generated duplicate field id {field_id}")

        field = FieldInstance(
            id=field_id,
            type=spec.field_type,
            label=spec.default_label,
            placeholder=spec.default_placeholder(),
            required=False,
            options=list(spec.default_options) if spec.needs_options else None,
            order=len(self._fields),
        )
        self._fields.append(field)
        logger.debug(f"Inserted field {field.id} at order {field.order}")
        return field

    def reorder(self, moved_id: str, target_id: str) -> bool:
        """
        Move ``moved_id`` to the position currently held by ``target_id``.

        Returns False, leaving every order value untouched, when the ids are
        equal or either one is unknown.
        """
        if moved_id == target_id:
            return False

        old_index = self._index_of(moved_id)
        new_index = self._index_of(target_id)
        if old_index == -1 or new_index == -1:
            return False

        moved = self._fields.pop(old_index)
        self._fields.insert(new_index, moved)
        self.renumber()
        logger.debug(f"Moved field {moved_id} from {old_index} to {new_index}")
        return True

    def update_field(self, updated: FieldInstance) -> bool:
        """Replace the field with the same id, keeping its position"""
        index = self._index_of(updated.id)
        if index == -1:
            logger.warning(f"Ignoring update for unknown field {updated.id}")
            return False

        current = self._fields[index]
        if updated.type != current.type:
            raise DesignerInvariantError(
                f"Field {updated.id} cannot change type from {current.type.value}"
            )
        self._fields[index] = updated
        return True

    def delete_field(self, field_id: str) -> bool:
        """Remove a field. Remaining order values are left as they are until save."""
        index = self._index_of(field_id)
        if index == -1:
            logger.warning(f"Ignoring delete for unknown field {field_id}")
            return False

        del self._fields[index]
        return True

    def renumber(self) -> None:
        """Rewrite every order value to the field's list position"""
        self._fields = [
            field.with_order(index) for index, field in enumerate(self._fields)
        ]

    def statistics(self) -> Dict[str, int]:
        required = sum(1 for field in self._fields if field.required)
        return {
            "total": len(self._fields),
            "required": required,
            "optional": len(self._fields) - required,
        }

    def save(self) -> FormDefinition:
        """
        Persist the working copy: create on first save, update afterwards.

        Raises:
            ValidationFailure: If the title is blank
            FormNotFoundError: If the form was deleted since it was loaded
            TransportFailure: If the gateway could not store the form
        """
        if not self.title or not self.title.strip():
            raise ValidationFailure(
                TITLE_REQUIRED_MESSAGE, {"title": TITLE_REQUIRED_MESSAGE}
            )
        if self.gateway is None:
            raise DesignerInvariantError("Designer has no persistence gateway")

        self.renumber()
        fields = list(self._fields)

        if self.form_id:
            saved = self.gateway.update_form(
                self.form_id,
                FormUpdate(
                    title=self.title, description=self.description, fields=fields
                ),
            )
        else:
            saved = self.gateway.create_form(
                FormDraft(title=self.title, description=self.description, fields=fields)
            )

        self.form_id = saved.id
        self.created_at = saved.created_at
        self.updated_at = saved.updated_at
        logger.info(f"Saved form {saved.id} with {len(fields)} fields")
        return saved
