from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from jobportal.config import Settings
from jobportal.database import get_db
from jobportal.dependencies import get_current_user, get_settings, require_admin
from jobportal.enums import JobType
from jobportal.errors import InvalidArgument
from jobportal.models.user import User
from jobportal.schemas.application import ApplicationEnvelope, ApplicationFields, application_to_response
from jobportal.schemas.common import MAX_LIMIT, MAX_PAGE, MessageResponse, total_pages
from jobportal.schemas.job import (
    JobCreate,
    JobListResponse,
    JobResponse,
    JobStatsResponse,
    JobUpdate,
    job_to_response,
)
from jobportal.services import application_service, job_service
from jobportal.services.upload_service import discard_upload, read_request_payload, store_upload, validate_payload

router = APIRouter(prefix="/jobs", tags=["jobs"])


@router.get("", response_model=JobListResponse)
async def list_jobs(
    search: str | None = None,
    location: str | None = None,
    type: str | None = None,
    category: str | None = None,
    page: int = Query(1, ge=1, le=MAX_PAGE),
    limit: int = Query(10, ge=1, le=MAX_LIMIT),
    db: Session = Depends(get_db),
):
    # Blank filters from the listing form mean "any"
    job_type = None
    if type:
        try:
            job_type = JobType(type)
        except ValueError as exc:
            raise InvalidArgument("Invalid job type") from exc

    jobs, total = job_service.list_jobs(
        db,
        search=search,
        location=location,
        job_type=job_type,
        category=category,
        page=page,
        limit=limit,
    )
    return JobListResponse(
        jobs=[job_to_response(j) for j in jobs],
        total_pages=total_pages(total, limit),
        current_page=page,
        total=total,
    )


@router.get("/stats", response_model=JobStatsResponse)
async def job_stats(db: Session = Depends(get_db)):
    return JobStatsResponse(**job_service.job_stats(db))


@router.get("/{job_id}", response_model=JobResponse)
async def get_job(job_id: str, db: Session = Depends(get_db)):
    return job_to_response(job_service.get_job(db, job_id))


@router.post("", response_model=JobResponse, status_code=201)
async def create_job(
    request: Request,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    fields, files = await read_request_payload(request)
    req = validate_payload(JobCreate, fields)
    logo = await store_upload(files.get("companyLogo"), settings)
    job = job_service.create_job(db, req, admin, company_logo=logo)
    return job_to_response(job)


@router.put("/{job_id}", response_model=JobResponse)
async def update_job(
    job_id: str,
    request: Request,
    _admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    fields, files = await read_request_payload(request)
    req = validate_payload(JobUpdate, fields)
    job_service.get_job(db, job_id)
    logo = await store_upload(files.get("companyLogo"), settings)
    job = job_service.update_job(db, job_id, req, company_logo=logo)
    return job_to_response(job)


@router.delete("/{job_id}", response_model=MessageResponse)
async def delete_job(
    job_id: str,
    _admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    job_service.delete_job(db, job_id)
    return MessageResponse(message="Job deleted successfully")


@router.post("/{job_id}/apply", response_model=ApplicationEnvelope, status_code=201)
async def apply_to_job(
    job_id: str,
    request: Request,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    fields, files = await read_request_payload(request)
    req = validate_payload(ApplicationFields, fields)
    # Fail fast before writing the resume to disk
    job_service.get_job(db, job_id)
    resume = await store_upload(files.get("resume"), settings)
    try:
        application = application_service.apply_to_job(db, job_id, user, req, resume=resume)
    except HTTPException:
        discard_upload(resume, settings)
        raise
    return ApplicationEnvelope(
        message="Application submitted successfully",
        application=application_to_response(application),
    )
