"""Public form pages: index, fill-in form and submission"""

from fastapi import APIRouter, Depends, HTTPException, Request

from form_builder.config import config
from form_builder.exceptions import FormNotFoundError, TransportFailure
from form_builder.logging_config import get_logger
from form_builder.models.field_type import FieldType
from form_builder.services.form_renderer import FormRenderer, get_form_renderer
from form_builder.services.form_service import FormService, get_form_service
from form_builder.services.submission_service import (
    SubmissionService,
    get_submission_service,
)
from form_builder.services.submission_session import SubmissionSession

router = APIRouter(include_in_schema=False)
logger = get_logger(__name__)


@router.get("/")
async def list_forms_page(
    request: Request,
    form_service: FormService = Depends(get_form_service),
    renderer: FormRenderer = Depends(get_form_renderer),
):
    """All saved forms with their share URLs"""
    try:
        forms = form_service.list_forms()
    except TransportFailure:
        raise HTTPException(status_code=500, detail="Failed to fetch forms")
    return renderer.page(
        request, "index.html", renderer.index_context(forms, config["app_base_url"])
    )


@router.get("/forms/{form_id}")
async def serve_form(
    request: Request,
    form_id: str,
    form_service: FormService = Depends(get_form_service),
    renderer: FormRenderer = Depends(get_form_renderer),
):
    """Serve a form in fill mode"""
    try:
        form = form_service.get_form(form_id)
    except FormNotFoundError:
        raise HTTPException(status_code=404, detail="Form not found")
    except TransportFailure:
        raise HTTPException(status_code=500, detail="Failed to fetch form")
    return renderer.page(request, "form.html", renderer.form_context(form))


@router.post("/forms/{form_id}")
async def submit_form(
    request: Request,
    form_id: str,
    form_service: FormService = Depends(get_form_service),
    submission_service: SubmissionService = Depends(get_submission_service),
    renderer: FormRenderer = Depends(get_form_renderer),
):
    """Validate and store one response, then show the thank-you page"""
    try:
        form = form_service.get_form(form_id)
    except FormNotFoundError:
        raise HTTPException(status_code=404, detail="Form not found")
    except TransportFailure:
        raise HTTPException(status_code=500, detail="Failed to fetch form")

    form_data = await request.form()
    session = SubmissionSession(form, submission_service)

    for field in form.fields:
        if field.type == FieldType.CHECKBOX:
            # Browsers omit unchecked boxes entirely
            session.set_answer(field.id, field.id in form_data)
            continue
        value = form_data.get(field.id)
        if value:
            session.set_answer(field.id, value)

    submission = session.submit()
    if submission is None:
        status_code = 503 if session.submit_error else 422
        logger.info(
            f"Submission for form {form_id} rejected with status {status_code}"
        )
        return renderer.page(
            request,
            "form.html",
            renderer.form_context(form, session),
            status_code=status_code,
        )

    logger.info(f"Stored submission {submission.id} for form {form_id}")
    return renderer.page(request, "thank_you.html", {"form": form})
