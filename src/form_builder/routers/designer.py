"""Designer API: drag/drop gestures, field configuration and saving"""

from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field

from form_builder.exceptions import FormNotFoundError, TransportFailure
from form_builder.handlers.drag_drop_coordinator import (
    DRAG_ACTIVATION_DISTANCE,
    DragDropCoordinator,
    DragSource,
    DropAction,
    DropTarget,
    SourceKind,
    TargetKind,
)
from form_builder.handlers.field_config_editor import FieldConfigEditor
from form_builder.logging_config import get_logger
from form_builder.models.field_registry import palette
from form_builder.models.field_type import FieldType
from form_builder.models.form import FormDefinition
from form_builder.models.form_field import FieldInstance
from form_builder.services.designer_session_store import (
    DesignerSession,
    DesignerSessionStore,
    get_session_store,
)
from form_builder.services.designer_state import DesignerState
from form_builder.services.form_renderer import FormRenderer, get_form_renderer
from form_builder.services.form_service import FormService, get_form_service

router = APIRouter(prefix="/api/designer", tags=["Designer"])
logger = get_logger(__name__)

FORM_NOT_FOUND_NOTICE = "Form not found. Started a new form instead."
SAVE_FAILED_MESSAGE = "Failed to save form. Please try again."
SESSION_NOT_UPDATED_MESSAGE = "Form saved but the designer session could not be updated"


class PaletteEntry(BaseModel):
    field_type: FieldType
    label: str
    description: str
    default_label: str
    supports_placeholder: bool
    needs_options: bool
    default_options: List[str]


class OpenSessionRequest(BaseModel):
    form_id: Optional[str] = Field(
        default=None, description="Saved form to load; omit to start a new form"
    )


class SessionResponse(BaseModel):
    session_id: str
    form_id: Optional[str]
    title: str
    description: str
    fields: List[FieldInstance]
    statistics: Dict[str, int]
    editing_field_id: Optional[str] = None
    notice: Optional[str] = None


class UpdateSessionRequest(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None


class DragSourcePayload(BaseModel):
    kind: SourceKind
    field_type: Optional[FieldType] = None
    field_id: Optional[str] = None


class DropTargetPayload(BaseModel):
    kind: TargetKind
    field_id: Optional[str] = None


class GestureRequest(BaseModel):
    source: DragSourcePayload
    target: DropTargetPayload
    distance: float = Field(
        ...,
        description=(
            "Pointer travel in pixels before release; must exceed "
            f"{DRAG_ACTIVATION_DISTANCE} to count as a drag"
        ),
    )


class EditorResponse(BaseModel):
    field_id: str
    title: str
    label: str
    placeholder: str
    required: bool
    options: List[str]
    supports_placeholder: bool
    needs_options: bool
    can_save: bool


class GestureResponse(BaseModel):
    action: DropAction
    field: Optional[FieldInstance] = None
    editor: Optional[EditorResponse] = None
    session: SessionResponse


class FieldConfigRequest(BaseModel):
    label: str
    placeholder: Optional[str] = None
    required: bool = False
    options: Optional[List[str]] = None


class SaveResponse(BaseModel):
    form: FormDefinition
    session: SessionResponse


def _load_session(session_id: str, store: DesignerSessionStore) -> DesignerSession:
    session = store.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Designer session not found")
    return session


def _session_response(
    session_id: str,
    designer: DesignerState,
    editing_field_id: Optional[str],
    notice: Optional[str] = None,
) -> SessionResponse:
    return SessionResponse(
        session_id=session_id,
        form_id=designer.form_id,
        title=designer.title,
        description=designer.description,
        fields=designer.fields,
        statistics=designer.statistics(),
        editing_field_id=editing_field_id,
        notice=notice,
    )


def _editor_response(editor: FieldConfigEditor) -> EditorResponse:
    spec = editor.spec
    return EditorResponse(
        field_id=editor.target.id,
        title=editor.title,
        label=editor.label,
        placeholder=editor.placeholder,
        required=editor.required,
        options=list(editor.options),
        supports_placeholder=spec.supports_placeholder,
        needs_options=spec.needs_options,
        can_save=editor.can_save,
    )


def _persist(
    session_id: str,
    session: DesignerSession,
    designer: DesignerState,
    store: DesignerSessionStore,
) -> None:
    session.designer = designer.snapshot()
    store.save(session_id, session)


@router.get("/palette", response_model=List[PaletteEntry])
async def get_palette():
    """Field types that can be dragged onto the canvas"""
    return [
        PaletteEntry(
            field_type=spec.field_type,
            label=spec.palette_label,
            description=spec.description,
            default_label=spec.default_label,
            supports_placeholder=spec.supports_placeholder,
            needs_options=spec.needs_options,
            default_options=list(spec.default_options),
        )
        for spec in palette()
    ]


@router.post("/sessions", response_model=SessionResponse, status_code=201)
async def open_session(
    request: OpenSessionRequest,
    store: DesignerSessionStore = Depends(get_session_store),
    form_service: FormService = Depends(get_form_service),
):
    """Open a designer on a new form, or on a saved one"""
    designer = DesignerState(gateway=form_service)
    notice = None

    if request.form_id:
        try:
            form = form_service.get_form(request.form_id)
            designer = DesignerState.from_form(form, gateway=form_service)
        except FormNotFoundError:
            # Unknown form: fall back to a blank designer
            logger.warning(f"Form {request.form_id} not found, opening a new form")
            notice = FORM_NOT_FOUND_NOTICE
        except TransportFailure:
            raise HTTPException(status_code=500, detail="Failed to fetch form")

    session = DesignerSession(designer=designer.snapshot())
    session_id = store.create(session)
    return _session_response(session_id, designer, None, notice)


@router.get("/sessions/{session_id}", response_model=SessionResponse)
async def get_session(
    session_id: str, store: DesignerSessionStore = Depends(get_session_store)
):
    session = _load_session(session_id, store)
    designer = DesignerState.from_snapshot(session.designer)
    return _session_response(session_id, designer, session.editing_field_id)


@router.patch("/sessions/{session_id}", response_model=SessionResponse)
async def update_session(
    session_id: str,
    request: UpdateSessionRequest,
    store: DesignerSessionStore = Depends(get_session_store),
):
    """Edit the form title and description"""
    session = _load_session(session_id, store)
    designer = DesignerState.from_snapshot(session.designer)

    if request.title is not None:
        designer.title = request.title
    if request.description is not None:
        designer.description = request.description

    _persist(session_id, session, designer, store)
    return _session_response(session_id, designer, session.editing_field_id)


@router.delete("/sessions/{session_id}")
async def close_session(
    session_id: str, store: DesignerSessionStore = Depends(get_session_store)
):
    """Discard a designer session without saving"""
    _load_session(session_id, store)
    store.delete(session_id)
    return {"message": "Designer session closed"}


@router.post("/sessions/{session_id}/drops", response_model=GestureResponse)
async def apply_gesture(
    session_id: str,
    request: GestureRequest,
    store: DesignerSessionStore = Depends(get_session_store),
):
    """
    Apply one complete drag gesture.

    Palette entry onto the canvas inserts a field and opens the editor on it;
    a field onto another field reorders. Everything else changes nothing.
    """
    session = _load_session(session_id, store)
    designer = DesignerState.from_snapshot(session.designer)
    editor = FieldConfigEditor(designer)
    coordinator = DragDropCoordinator(designer, editor=editor)

    source = DragSource(
        kind=request.source.kind,
        field_type=request.source.field_type,
        field_id=request.source.field_id,
    )
    target = DropTarget(kind=request.target.kind, field_id=request.target.field_id)

    if coordinator.begin(source, request.distance):
        outcome = coordinator.drop(target)
    else:
        outcome = None

    action = outcome.action if outcome else DropAction.NONE
    if action == DropAction.INSERT:
        session.editing_field_id = outcome.field.id
    if action != DropAction.NONE:
        _persist(session_id, session, designer, store)

    return GestureResponse(
        action=action,
        field=outcome.field if outcome else None,
        editor=_editor_response(editor) if editor.is_open else None,
        session=_session_response(session_id, designer, session.editing_field_id),
    )


@router.post(
    "/sessions/{session_id}/fields/{field_id}/editor", response_model=EditorResponse
)
async def open_editor(
    session_id: str,
    field_id: str,
    store: DesignerSessionStore = Depends(get_session_store),
):
    """Open the configuration editor on a field"""
    session = _load_session(session_id, store)
    designer = DesignerState.from_snapshot(session.designer)
    editor = FieldConfigEditor(designer)
    editor.open(designer.get_field(field_id))
    if not editor.is_open:
        raise HTTPException(status_code=404, detail="Field not found")

    session.editing_field_id = field_id
    store.save(session_id, session)
    return _editor_response(editor)


@router.put("/sessions/{session_id}/fields/{field_id}", response_model=SessionResponse)
async def commit_field_config(
    session_id: str,
    field_id: str,
    request: FieldConfigRequest,
    store: DesignerSessionStore = Depends(get_session_store),
):
    """Commit an edited field configuration"""
    session = _load_session(session_id, store)
    designer = DesignerState.from_snapshot(session.designer)
    editor = FieldConfigEditor(designer)
    editor.open(designer.get_field(field_id))
    if not editor.is_open:
        raise HTTPException(status_code=404, detail="Field not found")
    if session.editing_field_id != field_id:
        raise HTTPException(
            status_code=409, detail="Field editor is not open on this field"
        )

    editor.set_label(request.label)
    if request.placeholder is not None:
        editor.set_placeholder(request.placeholder)
    editor.set_required(request.required)
    if editor.needs_options and request.options is not None:
        editor.replace_options(request.options)

    # ValidationFailure propagates to the 422 handler; the session stays as it was
    editor.save()

    session.editing_field_id = None
    _persist(session_id, session, designer, store)
    return _session_response(session_id, designer, None)


@router.post("/sessions/{session_id}/editor/cancel", response_model=SessionResponse)
async def cancel_editor(
    session_id: str, store: DesignerSessionStore = Depends(get_session_store)
):
    """Close the editor, discarding its working copy"""
    session = _load_session(session_id, store)
    session.editing_field_id = None
    store.save(session_id, session)
    designer = DesignerState.from_snapshot(session.designer)
    return _session_response(session_id, designer, None)


@router.delete("/sessions/{session_id}/fields/{field_id}", response_model=SessionResponse)
async def delete_field(
    session_id: str,
    field_id: str,
    store: DesignerSessionStore = Depends(get_session_store),
):
    """Remove a field from the canvas"""
    session = _load_session(session_id, store)
    designer = DesignerState.from_snapshot(session.designer)

    if designer.delete_field(field_id):
        if session.editing_field_id == field_id:
            session.editing_field_id = None
        _persist(session_id, session, designer, store)

    return _session_response(session_id, designer, session.editing_field_id)


@router.post("/sessions/{session_id}/save", response_model=SaveResponse)
async def save_form(
    session_id: str,
    store: DesignerSessionStore = Depends(get_session_store),
    form_service: FormService = Depends(get_form_service),
):
    """Save the designer's form: create on first save, update afterwards"""
    session = _load_session(session_id, store)
    designer = DesignerState.from_snapshot(session.designer, gateway=form_service)

    try:
        saved = designer.save()
    except FormNotFoundError:
        raise HTTPException(status_code=404, detail="Form not found")
    except TransportFailure:
        raise HTTPException(status_code=500, detail=SAVE_FAILED_MESSAGE)

    # The form row is committed; a session still holding form_id=None would
    # create a second copy on the next save
    try:
        _persist(session_id, session, designer, store)
    except TransportFailure as e:
        logger.warning(f"Retrying session write after saving form {saved.id}: {e}")
        try:
            _persist(session_id, session, designer, store)
        except TransportFailure as retry_error:
            logger.error(
                f"Session {session_id} not updated after saving form {saved.id}: "
                f"{retry_error}"
            )
            raise HTTPException(
                status_code=503,
                detail={
                    "message": SESSION_NOT_UPDATED_MESSAGE,
                    "form_id": saved.id,
                },
            )
    return SaveResponse(
        form=saved,
        session=_session_response(session_id, designer, session.editing_field_id),
    )


@router.get("/sessions/{session_id}/canvas", response_class=HTMLResponse)
async def render_canvas(
    request: Request,
    session_id: str,
    store: DesignerSessionStore = Depends(get_session_store),
    renderer: FormRenderer = Depends(get_form_renderer),
):
    """Design-mode HTML view of the session"""
    session = _load_session(session_id, store)
    designer = DesignerState.from_snapshot(session.designer)
    return renderer.page(
        request,
        "canvas.html",
        renderer.canvas_context(designer, session.editing_field_id),
    )
