"""Renders fields, forms and the designer canvas to HTML"""

from pathlib import Path
from typing import Any, Dict, List, Optional

from fastapi import Request
from fastapi.templating import Jinja2Templates
from markupsafe import Markup

from form_builder.models.field_registry import get_field_spec, palette
from form_builder.models.field_type import FieldType
from form_builder.models.form import FormDefinition
from form_builder.models.form_field import FieldInstance
from form_builder.services.designer_state import DesignerState
from form_builder.services.submission_session import SubmissionSession

# Get template directory relative to this file
TEMPLATE_DIR = Path(__file__).parent.parent / "templates"

# One input macro per field type; a new FieldType must be added here
FIELD_INPUT_MACROS = {
    FieldType.TEXT: "text_input",
    FieldType.TEXTAREA: "textarea_input",
    FieldType.SELECT: "select_input",
    FieldType.CHECKBOX: "checkbox_input",
    FieldType.RADIO: "radio_input",
}


def ordered_fields(fields: List[FieldInstance]) -> List[FieldInstance]:
    """Fields in display order; ties keep their list order"""
    return sorted(fields, key=lambda f: f.order)


class FormRenderer:
    """Stateless projection of fields into HTML, shared by the designer and public pages"""

    def __init__(self, template_dir: Path = TEMPLATE_DIR):
        self.templates = Jinja2Templates(directory=str(template_dir))
        self.env = self.templates.env
        self.env.globals["render_field"] = self.render_field
        self.env.globals["field_spec"] = get_field_spec

    def render_field(
        self,
        field: FieldInstance,
        value: Any = None,
        error: Optional[str] = None,
        design_mode: bool = False,
    ) -> Markup:
        macros = self.env.get_template("_fields.html").module
        input_macro = getattr(macros, FIELD_INPUT_MACROS[FieldType(field.type)])
        control = input_macro(field, value, design_mode)
        return Markup(macros.field_block(field, control, error, design_mode))

    def form_context(
        self, form: FormDefinition, session: Optional[SubmissionSession] = None
    ) -> Dict[str, Any]:
        """Fill-mode page. Without a session the inputs are shown empty."""
        return {
            "form": form,
            "fields": ordered_fields(form.fields),
            "answers": session.answers if session else {},
            "errors": session.errors if session else {},
            "submit_error": session.submit_error if session else None,
        }

    def canvas_context(
        self, designer: DesignerState, editing_field_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Design-mode page: palette, canvas with disabled inputs and statistics.

        Fields are shown in the designer's list order, the order a save
        renumbers them to, even while deletions leave gaps in ``order``.
        """
        return {
            "designer": designer,
            "fields": designer.fields,
            "palette": palette(),
            "stats": designer.statistics(),
            "editing_field_id": editing_field_id,
        }

    def index_context(self, forms: List[FormDefinition], base_url: str) -> Dict[str, Any]:
        return {"forms": forms, "base_url": base_url.rstrip("/")}

    def page(
        self,
        request: Request,
        template_name: str,
        context: Dict[str, Any],
        status_code: int = 200,
    ):
        """TemplateResponse for a page route"""
        return self.templates.TemplateResponse(
            request, template_name, context, status_code=status_code
        )

    def render(self, template_name: str, context: Dict[str, Any]) -> str:
        """Page HTML as a string, from the same context a page route uses"""
        return self.env.get_template(template_name).render(**context)


_renderer: Optional[FormRenderer] = None


def get_form_renderer() -> FormRenderer:
    """Shared renderer instance (templates are compiled once)"""
    global _renderer
    if _renderer is None:
        _renderer = FormRenderer()
    return _renderer
