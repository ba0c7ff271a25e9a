"""Modal editing session over one field instance"""

import copy
import logging
from typing import List, Optional

from form_builder.exceptions import DesignerInvariantError, ValidationFailure
from form_builder.models import field_registry
from form_builder.models.field_registry import FieldTypeSpec, get_field_spec
from form_builder.models.form_field import FieldInstance, FieldPatch, apply_field_patch
from form_builder.services.designer_state import DesignerState

logger = logging.getLogger(__name__)

LABEL_REQUIRED_MESSAGE = "Label is required"
OPTIONS_REQUIRED_MESSAGE = "Add at least one option"


class FieldConfigEditor:
    """
    Edits a working copy of one field's label, placeholder, required flag
    and options. Nothing reaches the designer until ``save``; ``cancel``
    throws the working copy away.
    """

    def __init__(self, designer: DesignerState):
        self.designer = designer
        self.target: Optional[FieldInstance] = None
        self.label = ""
        self.placeholder = ""
        self.required = False
        self.options: List[str] = []

    @property
    def is_open(self) -> bool:
        return self.target is not None

    @property
    def spec(self) -> FieldTypeSpec:
        self._require_open()
        return get_field_spec(self.target.type)

    @property
    def needs_options(self) -> bool:
        return self.is_open and field_registry.needs_options(self.target.type)

    @property
    def title(self) -> str:
        if not self.is_open:
            return "Configure Field"
        return f"Configure {self.spec.palette_label}"

    def open(self, field: Optional[FieldInstance]) -> None:
        """Seed the working copy from ``field``. ``None`` leaves the editor closed."""
        if field is None:
            return
        self.target = field
        self.label = field.label or ""
        self.placeholder = field.placeholder or ""
        self.required = bool(field.required)
        self.options = copy.deepcopy(field.options) if field.options else []
        logger.debug(f"Opened editor on field {field.id}")

    def set_label(self, label: str) -> None:
        self._require_open()
        self.label = label

    def set_placeholder(self, placeholder: str) -> None:
        self._require_open()
        self.placeholder = placeholder

    def set_required(self, required: bool) -> None:
        self._require_open()
        self.required = bool(required)

    def append_option(self) -> None:
        self._require_options()
        self.options.append("")

    def update_option(self, index: int, text: str) -> None:
        self._require_options()
        self._check_index(index)
        self.options[index] = text

    def remove_option(self, index: int) -> None:
        self._require_options()
        self._check_index(index)
        del self.options[index]

    def replace_options(self, options: List[str]) -> None:
        """Swap the whole option list, one append/update per entry"""
        self._require_options()
        self.options = []
        for text in options:
            self.append_option()
            self.update_option(len(self.options) - 1, text)

    @property
    def can_save(self) -> bool:
        if not self.is_open or not self.label:
            return False
        if self.needs_options and not self.options:
            return False
        return True

    def save(self) -> FieldInstance:
        """
        Commit the working copy to the designer and close.

        id, type and order come from the designer's current instance and are
        never touched.

        Raises:
            ValidationFailure: If the label is empty or an option field has no options
            DesignerInvariantError: If the field has left the designer since opening
        """
        self._require_open()
        if not self.can_save:
            errors = {}
            if not self.label:
                errors["label"] = LABEL_REQUIRED_MESSAGE
            if self.needs_options and not self.options:
                errors["options"] = OPTIONS_REQUIRED_MESSAGE
            raise ValidationFailure("Field configuration is incomplete", errors)

        current = self.designer.get_field(self.target.id)
        if current is None:
            raise DesignerInvariantError(
                f"Field {self.target.id} is no longer on the form"
            )
        updated = apply_field_patch(current, self._build_patch())
        if not self.designer.update_field(updated):
            raise DesignerInvariantError(f"Field {updated.id} could not be updated")
        logger.debug(f"Committed editor changes to field {updated.id}")
        self._close()
        return updated

    def cancel(self) -> None:
        self._close()

    def _build_patch(self) -> FieldPatch:
        changes = {"label": self.label, "required": self.required}
        if self.spec.supports_placeholder:
            changes["placeholder"] = self.placeholder
        if self.needs_options:
            changes["options"] = list(self.options)
        return FieldPatch(**changes)

    def _close(self) -> None:
        self.target = None
        self.label = ""
        self.placeholder = ""
        self.required = False
        self.options = []

    def _require_open(self) -> None:
        if self.target is None:
            raise DesignerInvariantError("Field editor is not open")

    def _require_options(self) -> None:
        self._require_open()
        if not self.needs_options:
            raise DesignerInvariantError(
                f"{self.target.type.value} fields do not have options"
            )

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self.options):
            raise DesignerInvariantError(f"Option index {index} is out of range")
