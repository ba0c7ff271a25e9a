"""Form Service - Handles form definition database operations"""

import logging
from datetime import datetime, timezone
from typing import List

from fastapi import Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from form_builder.exceptions import FormNotFoundError, TransportFailure
from form_builder.models.database import get_db
from form_builder.models.form import Form, FormDefinition, FormDraft, FormUpdate
from form_builder.models.form_field import FieldInstance, FormField
from form_builder.utils.id_generator import default_record_id_generator

logger = logging.getLogger(__name__)


class FormService:
    """Service for creating, reading, updating and deleting form definitions"""

    def __init__(self, db_session: Session, id_generator=None):
        self.db = db_session
        self.id_generator = id_generator or default_record_id_generator

    def list_forms(self) -> List[FormDefinition]:
        """
        Get every stored form, oldest first

        Returns:
            List of FormDefinition objects with their fields
        """
        try:
            forms = self.db.exec(select(Form).order_by(Form.created_at)).all()
            result = [self._to_definition(form) for form in forms]
        except SQLAlchemyError as e:
            logger.error(f"Error listing forms: {e}")
            raise TransportFailure("Failed to fetch forms") from e

        logger.info(f"Retrieved {len(result)} forms")
        return result

    def get_form(self, form_id: str) -> FormDefinition:
        """
        Retrieve a form by id

        Args:
            form_id: Identifier of the form

        Returns:
            FormDefinition for the form

        Raises:
            FormNotFoundError: If no form has this id
        """
        try:
            form = self.db.get(Form, form_id)
            if form:
                return self._to_definition(form)
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving form {form_id}: {e}")
            raise TransportFailure("Failed to fetch form") from e

        raise FormNotFoundError(form_id)

    def create_form(self, draft: FormDraft) -> FormDefinition:
        """
        Create a new form with a fresh id and matching created/updated timestamps

        Args:
            draft: Title, description and fields of the new form

        Returns:
            The stored FormDefinition
        """
        now = datetime.now(timezone.utc)
        form = Form(
            id=self.id_generator.new_id("form"),
            title=draft.title,
            description=draft.description,
            created_at=now,
            updated_at=now,
        )
        try:
            self.db.add(form)
            # Flush the parent row first so field rows satisfy the foreign key
            self.db.flush()
            self._replace_fields(form.id, draft.fields)
            self.db.commit()
            self.db.refresh(form)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error creating form: {e}")
            raise TransportFailure("Failed to create form") from e

        logger.info(f"Form created successfully: {form.id}")
        return self._to_definition(form)

    def update_form(self, form_id: str, update: FormUpdate) -> FormDefinition:
        """
        Merge an update into an existing form

        Keys missing from the update keep their stored values. The id and
        created_at never change; updated_at is set to now.

        Args:
            form_id: Identifier of the form to update
            update: Partial form data

        Returns:
            The updated FormDefinition

        Raises:
            FormNotFoundError: If no form has this id
        """
        changes = update.model_dump(exclude_unset=True)
        try:
            form = self.db.get(Form, form_id)
            if not form:
                raise FormNotFoundError(form_id)

            if "title" in changes:
                form.title = update.title
            if "description" in changes:
                form.description = update.description
            if update.fields is not None:
                self._replace_fields(form.id, update.fields)

            form.updated_at = datetime.now(timezone.utc)

            self.db.add(form)
            self.db.commit()
            self.db.refresh(form)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error updating form {form_id}: {e}")
            raise TransportFailure("Failed to update form") from e

        logger.info(f"Form updated successfully: {form.id}")
        return self._to_definition(form)

    def delete_form(self, form_id: str) -> None:
        """
        Delete a form and its fields. Submissions are kept.

        Raises:
            FormNotFoundError: If no form has this id
        """
        try:
            form = self.db.get(Form, form_id)
            if not form:
                raise FormNotFoundError(form_id)

            for row in self._get_field_rows(form_id):
                self.db.delete(row)
            self.db.flush()
            self.db.delete(form)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error deleting form {form_id}: {e}")
            raise TransportFailure("Failed to delete form") from e

        logger.info(f"Form deleted successfully: {form_id}")

    def _replace_fields(self, form_id: str, fields: List[FieldInstance]) -> None:
        """Swap the stored field rows for ``fields``. Does NOT commit."""
        for row in self._get_field_rows(form_id):
            self.db.delete(row)
        for position, instance in enumerate(fields):
            self.db.add(FormField.from_instance(form_id, instance, position))
        logger.debug(f"Prepared {len(fields)} form fields for form {form_id}")

    def _get_field_rows(self, form_id: str) -> List[FormField]:
        statement = (
            select(FormField)
            .where(FormField.form_id == form_id)
            .order_by(FormField.field_order, FormField.position)
        )
        return list(self.db.exec(statement).all())

    def _to_definition(self, form: Form) -> FormDefinition:
        return FormDefinition(
            id=form.id,
            title=form.title,
            description=form.description,
            fields=[row.to_instance() for row in self._get_field_rows(form.id)],
            created_at=form.created_at,
            updated_at=form.updated_at,
        )


def get_form_service(db: Session = Depends(get_db)) -> FormService:
    """FastAPI dependency providing a FormService bound to the request session"""
    return FormService(db)
