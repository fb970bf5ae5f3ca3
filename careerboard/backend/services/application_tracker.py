"""
Application tracker service: ownership checks, validation and state changes
for job applications, their interview rounds and their attachments.

Every public operation takes the caller's user id (resolved from the bearer
token by the API layer) and performs a single load-mutate-persist cycle on
one application. Concurrent writers to the same application are not
coordinated: the last commit wins.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from ..exceptions import ForbiddenError, NotFoundError, ValidationError
from ..models.db import application as application_model
from ..models.db.user import utcnow
from .application_store import ApplicationStore

logger = logging.getLogger(__name__)

APPLICATION_STATUSES = ("Applied", "In Process", "Offered", "Rejected")
ROUND_STATUSES = ("Pending", "Passed", "Failed")
ATTACHMENT_TYPES = ("resume", "jd")
DEFAULT_PIPELINE = ("Screening", "OA", "Technical", "HR", "Offer")

UPDATABLE_FIELDS = ("company_name", "role", "status", "notes", "rounds", "documents", "attachments")


# ---------------------------------------------------------------------------
# Display helpers
# ---------------------------------------------------------------------------

def order_rounds_for_display(rounds: Iterable) -> list:
    """Default pipeline rounds first in pipeline order, then custom rounds in stored order.

    Only the first round carrying each default name takes the pipeline slot;
    later duplicates are treated as custom rounds.
    """
    rounds = list(rounds)
    by_name = {}
    for round_ in rounds:
        if round_.name in DEFAULT_PIPELINE:
            by_name.setdefault(round_.name, round_)
    ordered = [by_name[name] for name in DEFAULT_PIPELINE if name in by_name]
    placed = {id(r) for r in ordered}
    return ordered + [r for r in rounds if id(r) not in placed]


def _as_utc(value: Optional[datetime]) -> datetime:
    if value is None:
        return datetime.min.replace(tzinfo=timezone.utc)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def current_attachment(attachments: Iterable, attachment_type: str):
    """Most recently uploaded attachment of the given type, or None."""
    candidates = [a for a in attachments if a.type == attachment_type]
    if not candidates:
        return None
    return max(candidates, key=lambda a: (_as_utc(a.uploaded_at), a.id or 0))


def current_stage(rounds: Iterable) -> str:
    for round_ in order_rounds_for_display(rounds):
        if round_.status == "Pending":
            return round_.name
    return "Applied"


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------

def _require_text(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def _validate_choice(value: Any, choices, message: str) -> str:
    if value not in choices:
        raise ValidationError(message)
    return value


def _require_list(value: Any, field_name: str) -> list:
    if not isinstance(value, list):
        raise ValidationError(f"{field_name} must be a list")
    return value


def _validate_rounds(rounds: Any, check_status: bool = False) -> List[Dict[str, Any]]:
    if rounds is None:
        return []
    if not isinstance(rounds, list):
        raise ValidationError("rounds must be a list")
    validated = []
    for item in rounds:
        if not isinstance(item, dict):
            raise ValidationError("Each round must be an object")
        round_status = item.get("status") or "Pending"
        if check_status:
            _validate_choice(round_status, ROUND_STATUSES, "Invalid round status")
        validated.append({
            "id": item.get("id"),
            "name": _require_text(item.get("name"), "Round name"),
            "status": round_status,
            "date": item.get("date"),
            "notes": item.get("notes"),
        })
    return validated


def _validate_attachments(attachments: Any) -> List[Dict[str, Any]]:
    if attachments is None:
        return []
    if not isinstance(attachments, list):
        raise ValidationError("attachments must be a list")
    validated = []
    for item in attachments:
        if not isinstance(item, dict):
            raise ValidationError("Each attachment must be an object")
        validated.append({
            "id": item.get("id"),
            "type": _validate_choice(item.get("type"), ATTACHMENT_TYPES, "Invalid attachment type"),
            "filename": _require_text(item.get("filename"), "Attachment filename"),
            "url": _require_text(item.get("url"), "Attachment url"),
            "uploaded_at": item.get("uploaded_at"),
        })
    return validated


def _validate_documents(documents: Any) -> List[Dict[str, Any]]:
    if documents is None:
        return []
    if not isinstance(documents, list):
        raise ValidationError("documents must be a list")
    validated = []
    for item in documents:
        if not isinstance(item, dict):
            raise ValidationError("Each document must be an object")
        validated.append({
            "name": _require_text(item.get("name"), "Document name"),
            "url": _require_text(item.get("url"), "Document url"),
        })
    return validated


def _default_rounds() -> List[Dict[str, Any]]:
    return [{"id": None, "name": name, "status": "Pending", "date": None, "notes": None}
            for name in DEFAULT_PIPELINE]


class ApplicationService:
    """Operations on a user's job applications.

    The store and blob store are injected; the service holds no other state.
    """

    def __init__(self, store: ApplicationStore, blob_store=None):
        self.store = store
        self.blob_store = blob_store

    # -- access control ----------------------------------------------------

    def _load_owned(self, caller_id: int, application_id: int) -> application_model.Application:
        application = self.store.get(application_id)
        if application is None:
            raise NotFoundError("Application not found")
        if application.owner_id != caller_id:
            logger.warning(
                "User %s attempted to access application %s owned by another user",
                caller_id, application_id,
            )
            raise ForbiddenError()
        return application

    # -- applications ------------------------------------------------------

    def create(
        self,
        caller_id: int,
        company_name: Optional[str],
        role: Optional[str],
        status: Optional[str] = None,
        rounds: Optional[List[Dict[str, Any]]] = None,
        notes: Optional[str] = None,
    ) -> application_model.Application:
        company_name = _require_text(company_name, "Company name")
        role = _require_text(role, "Role")
        status = _validate_choice(status or "Applied", APPLICATION_STATUSES, "Invalid status")
        round_items = _validate_rounds(rounds) or _default_rounds()

        application = application_model.Application(
            owner_id=caller_id,
            company_name=company_name,
            role=role,
            status=status,
            notes=notes,
        )
        for position, item in enumerate(round_items):
            application.rounds.append(application_model.Round(
                name=item["name"],
                status=item["status"],
                date=item["date"],
                notes=item["notes"],
                position=position,
            ))

        application = self.store.insert(application)
        logger.info("User %s created application %s (%s)", caller_id, application.id, company_name)
        return application

    def list(self, caller_id: int) -> List[application_model.Application]:
        return self.store.list_by_owner(caller_id)

    def get(self, caller_id: int, application_id: int) -> application_model.Application:
        return self._load_owned(caller_id, application_id)

    def update(self, caller_id: int, application_id: int, fields: Dict[str, Any]) -> application_model.Application:
        """Merge allow-listed fields into the application.

        All values are validated before anything is written; ``rounds``,
        ``attachments`` and ``documents`` replace the stored lists wholesale.
        """
        unknown = sorted(set(fields) - set(UPDATABLE_FIELDS))
        if unknown:
            raise ValidationError(f"Field(s) cannot be updated: {', '.join(unknown)}")

        validated = {}
        for key, value in fields.items():
            validated[key] = self._validators[key](value)

        application = self._load_owned(caller_id, application_id)
        for key, value in validated.items():
            self._setters[key](self, application, value)

        application = self.store.save(application)
        logger.info("User %s updated application %s: %s", caller_id, application_id, sorted(validated))
        return application

    def delete(self, caller_id: int, application_id: int) -> None:
        application = self._load_owned(caller_id, application_id)
        self.store.delete(application)
        logger.info("User %s deleted application %s", caller_id, application_id)

    def set_status(self, caller_id: int, application_id: int, status: Optional[str]) -> application_model.Application:
        status = _validate_choice(status, APPLICATION_STATUSES, "Invalid status")
        application = self._load_owned(caller_id, application_id)
        application.status = status
        return self.store.save(application)

    # -- rounds ------------------------------------------------------------

    def add_round(self, caller_id: int, application_id: int, name: Optional[str]) -> application_model.Application:
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("Round name is required")
        application = self._load_owned(caller_id, application_id)
        next_position = max((r.position for r in application.rounds), default=-1) + 1
        application.rounds.append(application_model.Round(
            name=name.strip(), status="Pending", position=next_position,
        ))
        return self.store.save(application)

    def set_round_status(
        self, caller_id: int, application_id: int, round_id: int, status: Optional[str]
    ) -> application_model.Application:
        status = _validate_choice(status, ROUND_STATUSES, "Invalid round status")
        application = self._load_owned(caller_id, application_id)
        if self.store.update_round(application, round_id, status=status) is None:
            raise NotFoundError("Round not found")
        return application

    def delete_round(self, caller_id: int, application_id: int, round_id: int) -> application_model.Application:
        application = self._load_owned(caller_id, application_id)
        if not self.store.remove_round(application, round_id):
            raise NotFoundError("Round not found")
        return application

    # -- attachments -------------------------------------------------------

    def add_attachment(
        self,
        caller_id: int,
        application_id: int,
        attachment_type: Optional[str],
        file_bytes: Optional[bytes],
        original_filename: Optional[str],
    ) -> application_model.Application:
        """Store the file and append an attachment record.

        Earlier attachments of the same type are kept; the newest one is the
        current one.
        """
        _validate_choice(attachment_type, ATTACHMENT_TYPES, "Invalid attachment type")
        if file_bytes is None:
            raise ValidationError("File is required")
        application = self._load_owned(caller_id, application_id)

        blob = self.blob_store.store(file_bytes, original_filename or "upload")
        application.attachments.append(application_model.Attachment(
            type=attachment_type,
            filename=blob.filename,
            url=blob.url,
            uploaded_at=utcnow(),
        ))
        application = self.store.save(application)
        logger.info("User %s attached %s %s to application %s", caller_id, attachment_type, blob.filename, application_id)
        return application

    def delete_attachment(self, caller_id: int, application_id: int, attachment_id: int) -> application_model.Application:
        # The stored file itself is left in place.
        application = self._load_owned(caller_id, application_id)
        if not self.store.remove_attachment(application, attachment_id):
            raise NotFoundError("Attachment not found")
        return application

    # -- read models -------------------------------------------------------

    def pipeline(self, caller_id: int, application_id: int) -> Dict[str, Any]:
        application = self._load_owned(caller_id, application_id)
        return {
            "application_id": application.id,
            "current_stage": current_stage(application.rounds),
            "rounds": order_rounds_for_display(application.rounds),
            "current_attachments": {
                attachment_type: current_attachment(application.attachments, attachment_type)
                for attachment_type in ATTACHMENT_TYPES
            },
        }

    def summary(self, caller_id: int) -> Dict[str, Any]:
        applications = self.store.list_by_owner(caller_id)
        by_status = {status: 0 for status in APPLICATION_STATUSES}
        for application in applications:
            by_status[application.status] = by_status.get(application.status, 0) + 1
        return {
            "total": len(applications),
            "interviews": sum(
                1 for a in applications if any(r.status == "Pending" for r in a.rounds)
            ),
            "offers": by_status.get("Offered", 0),
            "by_status": by_status,
        }

    # -- update setters ----------------------------------------------------

    def _replace_rounds(self, application, items):
        existing = {r.id: r for r in application.rounds}
        new_rounds = []
        for position, item in enumerate(items):
            round_ = existing.pop(item["id"], None) if item["id"] is not None else None
            if round_ is None:
                round_ = application_model.Round()
            round_.name = item["name"]
            round_.status = item["status"]
            round_.date = item["date"]
            round_.notes = item["notes"]
            round_.position = position
            new_rounds.append(round_)
        application.rounds = new_rounds

    def _replace_attachments(self, application, items):
        existing = {a.id: a for a in application.attachments}
        new_attachments = []
        for item in items:
            attachment = existing.pop(item["id"], None) if item["id"] is not None else None
            if attachment is None:
                attachment = application_model.Attachment()
            attachment.type = item["type"]
            attachment.filename = item["filename"]
            attachment.url = item["url"]
            attachment.uploaded_at = item["uploaded_at"] or attachment.uploaded_at or utcnow()
            new_attachments.append(attachment)
        application.attachments = new_attachments

    def _replace_documents(self, application, items):
        application.documents = [
            application_model.Document(name=item["name"], url=item["url"], position=position)
            for position, item in enumerate(items)
        ]

    _validators = {
        "company_name": lambda v: _require_text(v, "Company name"),
        "role": lambda v: _require_text(v, "Role"),
        "status": lambda v: _validate_choice(v, APPLICATION_STATUSES, "Invalid status"),
        "notes": lambda v: v,
        # An explicit null would otherwise clear the stored list.
        "rounds": lambda v: _validate_rounds(_require_list(v, "rounds"), check_status=True),
        "documents": lambda v: _validate_documents(_require_list(v, "documents")),
        "attachments": lambda v: _validate_attachments(_require_list(v, "attachments")),
    }

    _setters = {
        "company_name": lambda self, app, v: setattr(app, "company_name", v),
        "role": lambda self, app, v: setattr(app, "role", v),
        "status": lambda self, app, v: setattr(app, "status", v),
        "notes": lambda self, app, v: setattr(app, "notes", v),
        "rounds": _replace_rounds,
        "documents": _replace_documents,
        "attachments": _replace_attachments,
    }
