"""Turns one drag gesture into at most one designer operation"""

import enum
import logging
from dataclasses import dataclass
from typing import Optional

from form_builder.exceptions import DesignerInvariantError
from form_builder.handlers.field_config_editor import FieldConfigEditor
from form_builder.models.field_type import FieldType
from form_builder.models.form_field import FieldInstance
from form_builder.services.designer_state import DesignerState

logger = logging.getLogger(__name__)

# A press on a draggable item becomes a drag only once the pointer has
# moved more than this many pixels. Anything up to it is a click and must
# never reorder anything.
DRAG_ACTIVATION_DISTANCE = 8


class DragState(str, enum.Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


class SourceKind(str, enum.Enum):
    PALETTE = "palette"
    FIELD = "field"


class TargetKind(str, enum.Enum):
    CANVAS = "canvas"
    FIELD = "field"
    NONE = "none"


class DropAction(str, enum.Enum):
    INSERT = "insert"
    REORDER = "reorder"
    NONE = "none"


@dataclass(frozen=True)
class DragSource:
    kind: SourceKind
    field_type: Optional[FieldType] = None  # palette entries
    field_id: Optional[str] = None  # canvas fields

    @classmethod
    def palette(cls, field_type: FieldType) -> "DragSource":
        return cls(kind=SourceKind.PALETTE, field_type=FieldType(field_type))

    @classmethod
    def canvas_field(cls, field_id: str) -> "DragSource":
        return cls(kind=SourceKind.FIELD, field_id=field_id)


@dataclass(frozen=True)
class DropTarget:
    kind: TargetKind
    field_id: Optional[str] = None

    @classmethod
    def canvas(cls) -> "DropTarget":
        return cls(kind=TargetKind.CANVAS)

    @classmethod
    def field(cls, field_id: str) -> "DropTarget":
        return cls(kind=TargetKind.FIELD, field_id=field_id)

    @classmethod
    def nowhere(cls) -> "DropTarget":
        return cls(kind=TargetKind.NONE)


@dataclass(frozen=True)
class DropOutcome:
    action: DropAction
    field: Optional[FieldInstance] = None


class DragDropCoordinator:
    """
    Two-state gesture machine: IDLE -> DRAGGING -> IDLE.

    Only the palette-to-canvas and field-to-other-field combinations touch
    the designer; every other drop ends the gesture without changes.
    """

    def __init__(
        self,
        designer: DesignerState,
        editor: Optional[FieldConfigEditor] = None,
        activation_distance: float = DRAG_ACTIVATION_DISTANCE,
    ):
        self.designer = designer
        self.editor = editor
        self.activation_distance = activation_distance
        self.state = DragState.IDLE
        self.active: Optional[DragSource] = None

    @property
    def is_dragging(self) -> bool:
        return self.state == DragState.DRAGGING

    def begin(self, source: DragSource, distance: float) -> bool:
        """
        Start a gesture on ``source`` once the pointer has moved ``distance``.

        Returns False, staying idle, unless the movement exceeds the
        activation distance.
        """
        if self.is_dragging:
            raise DesignerInvariantError("A drag gesture is already in progress")
        _validate_source(source)

        if distance <= self.activation_distance:
            logger.debug(f"Ignoring pointer movement of {distance}px")
            return False

        self.state = DragState.DRAGGING
        self.active = source
        return True

    def drop(self, target: DropTarget) -> DropOutcome:
        """Finish the gesture over ``target`` and apply at most one operation"""
        if not self.is_dragging:
            raise DesignerInvariantError("Drop received with no drag in progress")

        source = self.active
        try:
            if target.kind == TargetKind.FIELD and not target.field_id:
                raise DesignerInvariantError("Field drop target needs a field id")
            return self._apply(source, target)
        finally:
            self._reset()

    def cancel(self) -> None:
        self._reset()

    def _apply(self, source: DragSource, target: DropTarget) -> DropOutcome:
        if source.kind == SourceKind.PALETTE and target.kind == TargetKind.CANVAS:
            field = self.designer.insert_field(source.field_type)
            if self.editor is not None:
                self.editor.open(field)
            logger.info(f"Inserted {field.type.value} field {field.id}")
            return DropOutcome(action=DropAction.INSERT, field=field)

        if (
            source.kind == SourceKind.FIELD
            and target.kind == TargetKind.FIELD
            and source.field_id != target.field_id
        ):
            if self.designer.reorder(source.field_id, target.field_id):
                return DropOutcome(
                    action=DropAction.REORDER,
                    field=self.designer.get_field(source.field_id),
                )

        return DropOutcome(action=DropAction.NONE)

    def _reset(self) -> None:
        self.state = DragState.IDLE
        self.active = None


def _validate_source(source: DragSource) -> None:
    if source.kind == SourceKind.PALETTE and source.field_type is None:
        raise DesignerInvariantError("Palette drag source needs a field type")
    if source.kind == SourceKind.FIELD and not source.field_id:
        raise DesignerInvariantError("Canvas drag source needs a field id")
