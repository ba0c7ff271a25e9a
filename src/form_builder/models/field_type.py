"""Enums for the application"""

from enum import Enum


class FieldType(str, Enum):
    """Enum for form field types"""

    TEXT = "text"
    TEXTAREA = "textarea"
    SELECT = "select"
    CHECKBOX = "checkbox"
    RADIO = "radio"
