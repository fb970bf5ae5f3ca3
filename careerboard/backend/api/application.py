from typing import List, Optional
from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.orm import Session

from .. import schemas
from ..models.db.database import get_db
from ..services.application_store import ApplicationStore
from ..services.application_tracker import ApplicationService
from ..services.blob_store import LocalBlobStore, get_blob_store
from .auth import get_current_user

router = APIRouter()


def get_application_service(
    db: Session = Depends(get_db),
    blob_store: LocalBlobStore = Depends(get_blob_store),
) -> ApplicationService:
    return ApplicationService(ApplicationStore(db), blob_store)


@router.post("", response_model=schemas.Application, status_code=status.HTTP_201_CREATED)
def create_application(
    application: schemas.ApplicationCreate,
    service: ApplicationService = Depends(get_application_service),
    current_user: schemas.User = Depends(get_current_user)
):
    """
    Create a new job application for the current user.
    Without an explicit list of rounds the default interview pipeline is used.
    """
    rounds = [r.model_dump() for r in application.rounds] if application.rounds else None
    return service.create(
        current_user.id,
        company_name=application.company_name,
        role=application.role,
        status=application.status,
        rounds=rounds,
        notes=application.notes,
    )


@router.get("", response_model=List[schemas.Application])
def read_applications(
    service: ApplicationService = Depends(get_application_service),
    current_user: schemas.User = Depends(get_current_user)
):
    """
    Retrieve all job applications for the current user, newest first.
    """
    return service.list(current_user.id)


@router.get("/summary", response_model=schemas.ApplicationSummary)
def read_summary(
    service: ApplicationService = Depends(get_application_service),
    current_user: schemas.User = Depends(get_current_user)
):
    return service.summary(current_user.id)


@router.get("/{application_id}", response_model=schemas.Application)
def read_application(
    application_id: int,
    service: ApplicationService = Depends(get_application_service),
    current_user: schemas.User = Depends(get_current_user)
):
    return service.get(current_user.id, application_id)


@router.get("/{application_id}/pipeline", response_model=schemas.ApplicationPipeline)
def read_application_pipeline(
    application_id: int,
    service: ApplicationService = Depends(get_application_service),
    current_user: schemas.User = Depends(get_current_user)
):
    """
    Rounds in display order plus the latest resume and job description.
    """
    return service.pipeline(current_user.id, application_id)


@router.put("/{application_id}", response_model=schemas.Application)
def update_application(
    application_id: int,
    application: schemas.ApplicationUpdate,
    service: ApplicationService = Depends(get_application_service),
    current_user: schemas.User = Depends(get_current_user)
):
    """
    Update a job application's details. Only the fields present in the body are changed.
    """
    return service.update(current_user.id, application_id, application.model_dump(exclude_unset=True))


@router.delete("/{application_id}", response_model=schemas.Message)
def delete_application(
    application_id: int,
    service: ApplicationService = Depends(get_application_service),
    current_user: schemas.User = Depends(get_current_user)
):
    service.delete(current_user.id, application_id)
    return {"message": "Application deleted"}


@router.patch("/{application_id}/status", response_model=schemas.Application)
def update_application_status(
    application_id: int,
    body: schemas.StatusUpdate,
    service: ApplicationService = Depends(get_application_service),
    current_user: schemas.User = Depends(get_current_user)
):
    return service.set_status(current_user.id, application_id, body.status)


@router.post("/{application_id}/rounds", response_model=schemas.Application, status_code=status.HTTP_201_CREATED)
def add_round(
    application_id: int,
    body: schemas.RoundCreate,
    service: ApplicationService = Depends(get_application_service),
    current_user: schemas.User = Depends(get_current_user)
):
    return service.add_round(current_user.id, application_id, body.name)


@router.patch("/{application_id}/rounds/{round_id}", response_model=schemas.Application)
def update_round_status(
    application_id: int,
    round_id: int,
    body: schemas.StatusUpdate,
    service: ApplicationService = Depends(get_application_service),
    current_user: schemas.User = Depends(get_current_user)
):
    return service.set_round_status(current_user.id, application_id, round_id, body.status)


@router.delete("/{application_id}/rounds/{round_id}", response_model=schemas.Application)
def delete_round(
    application_id: int,
    round_id: int,
    service: ApplicationService = Depends(get_application_service),
    current_user: schemas.User = Depends(get_current_user)
):
    return service.delete_round(current_user.id, application_id, round_id)


@router.post("/{application_id}/attachments", response_model=schemas.Application, status_code=status.HTTP_201_CREATED)
def add_attachment(
    application_id: int,
    type: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    service: ApplicationService = Depends(get_application_service),
    current_user: schemas.User = Depends(get_current_user)
):
    """
    Upload a resume or job description (multipart form: ``type`` and ``file``).
    """
    # One byte past the ceiling is enough for the store to reject an oversized file.
    file_bytes = file.file.read(service.blob_store.max_size + 1) if file is not None else None
    original_filename = file.filename if file is not None else None
    return service.add_attachment(current_user.id, application_id, type, file_bytes, original_filename)


@router.delete("/{application_id}/attachments/{attachment_id}", response_model=schemas.Application)
def delete_attachment(
    application_id: int,
    attachment_id: int,
    service: ApplicationService = Depends(get_application_service),
    current_user: schemas.User = Depends(get_current_user)
):
    return service.delete_attachment(current_user.id, application_id, attachment_id)
