"""Static catalog of the field types offered in the designer palette"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from form_builder.models.field_type import FieldType


@dataclass(frozen=True)
class FieldTypeSpec:
    field_type: FieldType
    palette_label: str  # shown on the palette card and in the editor title
    description: str  # one-line hint under the palette label
    default_label: str  # label given to a freshly dropped field
    supports_placeholder: bool
    needs_options: bool
    default_options: Tuple[str, ...] = ()

    def default_placeholder(self) -> Optional[str]:
        if not self.supports_placeholder:
            return None
        return f"Enter {self.default_label.lower()}"


FIELD_TYPES: dict[FieldType, FieldTypeSpec] = {
    FieldType.TEXT: FieldTypeSpec(
        field_type=FieldType.TEXT,
        palette_label="Text Input",
        description="Single line text input",
        default_label="Text Input",
        supports_placeholder=True,
        needs_options=False,
    ),
    FieldType.TEXTAREA: FieldTypeSpec(
        field_type=FieldType.TEXTAREA,
        palette_label="Text Area",
        description="Multi-line text input",
        default_label="Text Area",
        supports_placeholder=True,
        needs_options=False,
    ),
    FieldType.SELECT: FieldTypeSpec(
        field_type=FieldType.SELECT,
        palette_label="Select",
        description="Dropdown selection",
        default_label="Select Option",
        supports_placeholder=False,
        needs_options=True,
        default_options=("Option 1", "Option 2"),
    ),
    FieldType.CHECKBOX: FieldTypeSpec(
        field_type=FieldType.CHECKBOX,
        palette_label="Checkbox",
        description="Single checkbox",
        default_label="Checkbox",
        supports_placeholder=False,
        needs_options=False,
    ),
    FieldType.RADIO: FieldTypeSpec(
        field_type=FieldType.RADIO,
        palette_label="Radio Group",
        description="Multiple choice options",
        default_label="Radio Group",
        supports_placeholder=False,
        needs_options=True,
        default_options=("Option 1", "Option 2"),
    ),
}


def get_field_spec(field_type: FieldType) -> FieldTypeSpec:
    """Look up the registry entry for a field type."""
    return FIELD_TYPES[FieldType(field_type)]


def needs_options(field_type: FieldType) -> bool:
    return get_field_spec(field_type).needs_options


def palette() -> List[FieldTypeSpec]:
    """Palette entries in display order."""
    return list(FIELD_TYPES.values())
