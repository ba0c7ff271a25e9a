"""JSON API over stored forms and their submissions"""

from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, HTTPException

from form_builder.exceptions import FormNotFoundError, TransportFailure
from form_builder.logging_config import get_logger
from form_builder.models.form import FormDefinition, FormDraft, FormUpdate
from form_builder.models.submission import Submission
from form_builder.services.form_service import FormService, get_form_service
from form_builder.services.submission_service import (
    SubmissionService,
    get_submission_service,
)

router = APIRouter(prefix="/api/forms", tags=["Forms"])
logger = get_logger(__name__)


@router.get("", response_model=List[FormDefinition])
async def list_forms(form_service: FormService = Depends(get_form_service)):
    """Get all forms"""
    try:
        return form_service.list_forms()
    except TransportFailure:
        raise HTTPException(status_code=500, detail="Failed to fetch forms")


@router.post("", response_model=FormDefinition, status_code=201)
async def create_form(
    draft: FormDraft, form_service: FormService = Depends(get_form_service)
):
    """Create a new form"""
    try:
        return form_service.create_form(draft)
    except TransportFailure:
        raise HTTPException(status_code=500, detail="Failed to create form")


@router.get("/{form_id}", response_model=FormDefinition)
async def get_form(form_id: str, form_service: FormService = Depends(get_form_service)):
    """Get a specific form by id"""
    try:
        return form_service.get_form(form_id)
    except FormNotFoundError:
        raise HTTPException(status_code=404, detail="Form not found")
    except TransportFailure:
        raise HTTPException(status_code=500, detail="Failed to fetch form")


@router.put("/{form_id}", response_model=FormDefinition)
async def update_form(
    form_id: str,
    update: FormUpdate,
    form_service: FormService = Depends(get_form_service),
):
    """Update a specific form; keys left out of the body are kept"""
    try:
        return form_service.update_form(form_id, update)
    except FormNotFoundError:
        raise HTTPException(status_code=404, detail="Form not found")
    except TransportFailure:
        raise HTTPException(status_code=500, detail="Failed to update form")


@router.delete("/{form_id}")
async def delete_form(
    form_id: str, form_service: FormService = Depends(get_form_service)
):
    """Delete a specific form"""
    try:
        form_service.delete_form(form_id)
    except FormNotFoundError:
        raise HTTPException(status_code=404, detail="Form not found")
    except TransportFailure:
        raise HTTPException(status_code=500, detail="Failed to delete form")
    return {"message": "Form deleted successfully"}


@router.post("/{form_id}/submissions", response_model=Submission, status_code=201)
async def create_submission(
    form_id: str,
    answers: Dict[str, Any] = Body(...),
    submission_service: SubmissionService = Depends(get_submission_service),
):
    """Store raw answers for a form. The form id is not checked."""
    try:
        return submission_service.create_submission(form_id, answers)
    except TransportFailure:
        raise HTTPException(status_code=500, detail="Failed to submit form")


@router.get("/{form_id}/submissions", response_model=List[Submission])
async def list_submissions(
    form_id: str,
    submission_service: SubmissionService = Depends(get_submission_service),
):
    """Get all submissions for a form"""
    try:
        return submission_service.list_submissions(form_id)
    except TransportFailure:
        raise HTTPException(status_code=500, detail="Failed to fetch submissions")
