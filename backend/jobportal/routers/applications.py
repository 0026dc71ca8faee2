from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from jobportal.config import Settings
from jobportal.database import get_db
from jobportal.dependencies import get_current_user, get_settings, require_admin
from jobportal.errors import InvalidArgument
from jobportal.models.user import User
from jobportal.schemas.application import (
    ApplicationCreate,
    ApplicationEnvelope,
    ApplicationResponse,
    MyApplicationsResponse,
    StatusUpdate,
    application_to_response,
)
from jobportal.schemas.common import MessageResponse
from jobportal.services import application_service, job_service
from jobportal.services.upload_service import discard_upload, read_request_payload, store_upload, validate_payload
from jobportal.utils.ids import is_valid_id

router = APIRouter(prefix="/applications", tags=["applications"])


@router.get("/my-applications", response_model=MyApplicationsResponse)
async def my_applications(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    applications = application_service.list_for_applicant(db, user.id)
    return MyApplicationsResponse(applications=[application_to_response(a) for a in applications])


@router.get("/job/{job_id}", response_model=list[ApplicationResponse])
async def applications_for_job(
    job_id: str,
    _admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    applications = application_service.list_for_job(db, job_id)
    return [application_to_response(a, with_profile=True) for a in applications]


@router.post("", response_model=ApplicationEnvelope, status_code=201)
async def create_application(
    request: Request,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    fields, files = await read_request_payload(request)
    if not fields.get("jobId") and not fields.get("job_id"):
        raise InvalidArgument("jobId is required")
    req = validate_payload(ApplicationCreate, fields)
    if not is_valid_id(req.job_id):
        raise InvalidArgument("Invalid jobId format")

    job_service.get_job(db, req.job_id)
    resume = await store_upload(files.get("resume"), settings)
    try:
        application = application_service.apply_to_job(db, req.job_id, user, req, resume=resume)
    except HTTPException:
        discard_upload(resume, settings)
        raise
    return ApplicationEnvelope(
        message="Application submitted successfully",
        application=application_to_response(application),
    )


@router.put("/{application_id}/status", response_model=ApplicationEnvelope)
async def update_status(
    application_id: str,
    req: StatusUpdate,
    _admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    application = application_service.set_status(db, application_id, req.status)
    return ApplicationEnvelope(
        message="Application status updated successfully",
        application=application_to_response(application, with_profile=True),
    )


@router.delete("/{application_id}", response_model=MessageResponse)
async def delete_application(
    application_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    application_service.delete_application(db, application_id, user)
    return MessageResponse(message="Application deleted successfully")
