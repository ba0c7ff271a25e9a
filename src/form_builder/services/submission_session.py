"""Collects, validates and submits one respondent's answers"""

import logging
import re
from typing import Any, Dict, Optional

from form_builder.exceptions import TransportFailure
from form_builder.models.field_type import FieldType
from form_builder.models.form import FormDefinition
from form_builder.models.form_field import FieldInstance
from form_builder.models.submission import Submission

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
INVALID_EMAIL_MESSAGE = "Please enter a valid email address"
SUBMIT_FAILED_MESSAGE = "Failed to submit form. Please try again."


def validate_field(field: FieldInstance, value: Any) -> Optional[str]:
    """Return the error message for ``value`` or None when it is acceptable"""
    if field.required:
        if field.type == FieldType.CHECKBOX:
            if not value:
                return f"{field.label} is required"
        elif not value or (isinstance(value, str) and not value.strip()):
            return f"{field.label} is required"

    # Text inputs labelled as an email address must look like one
    if field.type == FieldType.TEXT and "email" in field.label.lower() and value:
        if not EMAIL_PATTERN.match(str(value)):
            return INVALID_EMAIL_MESSAGE

    return None


class SubmissionSession:
    """Fill-mode state for a form: answers, per-field errors and submit status"""

    def __init__(self, form: FormDefinition, gateway):
        self.form = form
        self.gateway = gateway
        self.answers: Dict[str, Any] = {}
        self.errors: Dict[str, str] = {}
        self.is_submitting = False
        self.is_submitted = False
        self.submit_error: Optional[str] = None

    def set_answer(self, field_id: str, value: Any) -> None:
        self.answers[field_id] = value
        self.errors.pop(field_id, None)

    def validate(self) -> bool:
        errors = {}
        for field in self.form.fields:
            error = validate_field(field, self.answers.get(field.id))
            if error:
                errors[field.id] = error
        self.errors = errors
        return not errors

    def submit(self) -> Optional[Submission]:
        """
        Validate and hand the answers to the gateway.

        Returns the stored submission, or None when validation failed or the
        gateway could not be reached (``submit_error`` then holds the message).
        """
        self.submit_error = None
        if not self.validate():
            return None

        self.is_submitting = True
        try:
            submission = self.gateway.create_submission(self.form.id, dict(self.answers))
        except TransportFailure as e:
            logger.error(f"Error submitting form {self.form.id}: {e}")
            self.submit_error = SUBMIT_FAILED_MESSAGE
            return None
        finally:
            self.is_submitting = False

        self.is_submitted = True
        self.answers = {}
        return submission

    def reset(self) -> None:
        self.answers = {}
        self.errors = {}
        self.is_submitted = False
        self.submit_error = None
