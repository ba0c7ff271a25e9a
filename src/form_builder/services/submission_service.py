"""Submission service for handling form submissions"""

import logging
from typing import Any, Dict, List

from fastapi import Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from form_builder.exceptions import TransportFailure
from form_builder.models.database import get_db
from form_builder.models.submission import Submission
from form_builder.utils.id_generator import default_record_id_generator

logger = logging.getLogger(__name__)


class SubmissionService:
    """Service for appending and listing form submissions"""

    def __init__(self, db_session: Session, id_generator=None):
        self.db = db_session
        self.id_generator = id_generator or default_record_id_generator

    def create_submission(self, form_id: str, answers: Dict[str, Any]) -> Submission:
        """
        Append a submission for a form.

        The form id is stored as given; it is not checked against stored forms.

        Args:
            form_id: Identifier of the form the answers belong to
            answers: Mapping of field id to answer value

        Returns:
            Submission: The created submission
        """
        submission = Submission(
            id=self.id_generator.new_id("submission"),
            form_id=form_id,
            data=dict(answers),
        )
        try:
            self.db.add(submission)
            self.db.commit()
            self.db.refresh(submission)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error creating submission for form {form_id}: {e}")
            raise TransportFailure("Failed to submit form") from e

        logger.info(f"Created submission {submission.id} for form {form_id}")
        return submission

    def list_submissions(self, form_id: str) -> List[Submission]:
        """Get all submissions for a specific form, oldest first"""
        try:
            stmt = (
                select(Submission)
                .where(Submission.form_id == form_id)
                .order_by(Submission.submitted_at)
            )
            return list(self.db.exec(stmt).all())
        except SQLAlchemyError as e:
            logger.error(f"Error fetching submissions for form {form_id}: {e}")
            raise TransportFailure("Failed to fetch submissions") from e


def get_submission_service(db: Session = Depends(get_db)) -> SubmissionService:
    """FastAPI dependency providing a SubmissionService bound to the request session"""
    return SubmissionService(db)
