"""Database models for Form Builder"""

from form_builder.models.form import Form
from form_builder.models.form_field import FormField
from form_builder.models.submission import Submission

__all__ = [
    "Form",
    "FormField",
    "Submission",
]
