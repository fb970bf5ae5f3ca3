"""
SQLAlchemy-backed persistence for Application records and their embedded
rounds, attachments and documents.
"""
import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..exceptions import StoreError
from ..models.db import application as application_model
from ..models.db.user import utcnow

logger = logging.getLogger(__name__)


class ApplicationStore:
    """Thin repository over one SQLAlchemy session.

    Every write commits immediately; a failed commit is rolled back and
    reported as StoreError so no partial change survives.
    """

    def __init__(self, db: Session):
        self.db = db

    def _commit(self, action: str):
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Store failure while trying to %s: %s", action, e)
            raise StoreError(f"Failed to {action}") from e

    def _query(self, action: str, fn):
        try:
            return fn()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Store failure while trying to %s: %s", action, e)
            raise StoreError(f"Failed to {action}") from e

    def insert(self, application: application_model.Application) -> application_model.Application:
        self.db.add(application)
        self._commit("create application")
        self.db.refresh(application)
        return application

    def get(self, application_id: int) -> Optional[application_model.Application]:
        return self._query(
            "fetch application",
            lambda: self.db.get(application_model.Application, application_id),
        )

    def list_by_owner(self, owner_id: int) -> List[application_model.Application]:
        Application = application_model.Application
        return self._query(
            "fetch applications",
            lambda: self.db.query(Application)
            .filter(Application.owner_id == owner_id)
            .order_by(Application.created_at.desc(), Application.id.desc())
            .all(),
        )

    def save(self, application: application_model.Application) -> application_model.Application:
        """Persist the whole application, including any change to its children."""
        application.updated_at = utcnow()
        self._commit("update application")
        self.db.refresh(application)
        return application

    def delete(self, application: application_model.Application) -> None:
        self.db.delete(application)
        self._commit("delete application")

    def update_round(self, application, round_id: int, **changes):
        """Apply ``changes`` to the round with ``round_id``; None if the application has no such round."""
        round_ = application.find_round(round_id)
        if round_ is None:
            return None
        for key, value in changes.items():
            setattr(round_, key, value)
        self.save(application)
        return round_

    def remove_round(self, application, round_id: int) -> bool:
        round_ = application.find_round(round_id)
        if round_ is None:
            return False
        application.rounds.remove(round_)
        self.save(application)
        return True

    def remove_attachment(self, application, attachment_id: int) -> bool:
        attachment = application.find_attachment(attachment_id)
        if attachment is None:
            return False
        application.attachments.remove(attachment)
        self.save(application)
        return True
