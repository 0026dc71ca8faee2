from fastapi import APIRouter, Depends, Query
from sqlalchemy import func
from sqlalchemy.orm import Session

from jobportal.database import get_db
from jobportal.dependencies import require_admin
from jobportal.enums import ApplicationStatus
from jobportal.errors import InvalidArgument
from jobportal.models.job import Job
from jobportal.models.user import User
from jobportal.schemas.admin import AdminJobListResponse, AdminStatsResponse
from jobportal.schemas.application import (
    ApplicationEnvelope,
    ApplicationPage,
    ApplicationResponse,
    StatusUpdate,
    application_to_response,
)
from jobportal.schemas.common import MAX_LIMIT, MAX_PAGE, MessageResponse, total_pages
from jobportal.schemas.job import job_to_response
from jobportal.schemas.user import RoleUpdate, UserEnvelope, UserListResponse, UserResponse, user_to_response
from jobportal.services import application_service, job_service, user_service

router = APIRouter(
    prefix="/admin",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
)


# --- Users ---

@router.get("/users", response_model=UserListResponse)
async def list_users(
    search: str | None = None,
    page: int = Query(1, ge=1, le=MAX_PAGE),
    limit: int = Query(10, ge=1, le=MAX_LIMIT),
    db: Session = Depends(get_db),
):
    users, total = user_service.list_users(db, search, page, limit)
    return UserListResponse(
        users=[user_to_response(u) for u in users],
        total_pages=total_pages(total, limit),
        current_page=page,
        total=total,
    )


@router.get("/users/recent", response_model=list[UserResponse])
async def recent_users(db: Session = Depends(get_db)):
    return [user_to_response(u) for u in user_service.recent_users(db)]


@router.put("/users/{user_id}/role", response_model=UserEnvelope)
async def change_role(user_id: str, req: RoleUpdate, db: Session = Depends(get_db)):
    user = user_service.change_role(db, user_id, req.role)
    return UserEnvelope(message="User role updated successfully", user=user_to_response(user))


@router.delete("/users/{user_id}", response_model=MessageResponse)
async def delete_user(user_id: str, db: Session = Depends(get_db)):
    user_service.delete_user(db, user_id)
    return MessageResponse(message="User deleted successfully")


# --- Jobs ---

@router.get("/jobs", response_model=AdminJobListResponse)
async def list_jobs(
    search: str | None = None,
    page: int = Query(1, ge=1, le=MAX_PAGE),
    limit: int = Query(10, ge=1, le=MAX_LIMIT),
    db: Session = Depends(get_db),
):
    rows, total = job_service.list_all_jobs(db, search, page, limit)
    return AdminJobListResponse(
        jobs=[job_to_response(job, application_count=count) for job, count in rows],
        total_pages=total_pages(total, limit),
        current_page=page,
        total=total,
    )


@router.delete("/jobs/{job_id}", response_model=MessageResponse)
async def delete_job(job_id: str, db: Session = Depends(get_db)):
    job_service.delete_job(db, job_id)
    return MessageResponse(message="Job and all associated applications deleted successfully")


# --- Stats ---

@router.get("/stats", response_model=AdminStatsResponse)
async def stats(db: Session = Depends(get_db)):
    return AdminStatsResponse(
        total_users=db.query(func.count(User.id)).scalar(),
        total_jobs=db.query(func.count(Job.id)).scalar(),
        total_applications=application_service.count_applications(db),
        pending_applications=application_service.count_applications(db, ApplicationStatus.PENDING),
    )


# --- Applications ---

@router.get("/applications", response_model=ApplicationPage)
async def list_applications(
    status: str | None = None,
    search: str | None = None,
    page: int = Query(1, ge=1, le=MAX_PAGE),
    limit: int = Query(10, ge=1, le=MAX_LIMIT),
    db: Session = Depends(get_db),
):
    status_filter = None
    if status and status != "all":
        try:
            status_filter = ApplicationStatus(status)
        except ValueError as exc:
            raise InvalidArgument("Invalid status") from exc

    applications, total = application_service.search_applications(db, status_filter, search, page, limit)
    return ApplicationPage(
        applications=[application_to_response(a) for a in applications],
        total_pages=total_pages(total, limit),
        current_page=page,
        total=total,
    )


@router.get("/applications/recent", response_model=list[ApplicationResponse])
async def recent_applications(db: Session = Depends(get_db)):
    return [application_to_response(a) for a in application_service.recent_applications(db)]


@router.get("/applications/{application_id}", response_model=ApplicationResponse)
async def get_application(application_id: str, db: Session = Depends(get_db)):
    return application_to_response(application_service.get_application(db, application_id))


@router.put("/applications/{application_id}/status", response_model=ApplicationEnvelope)
async def update_status(application_id: str, req: StatusUpdate, db: Session = Depends(get_db)):
    application = application_service.set_status(db, application_id, req.status)
    return ApplicationEnvelope(
        message="Application status updated successfully",
        application=application_to_response(application),
    )


@router.delete("/applications/{application_id}", response_model=MessageResponse)
async def delete_application(
    application_id: str,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    application_service.delete_application(db, application_id, admin)
    return MessageResponse(message="Application deleted successfully")
