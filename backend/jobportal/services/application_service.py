"""Application ledger: apply, withdraw, review.

The job's ``application_count`` is kept equal to the number of live
applications for that job. Every insert or delete of an application changes
the counter with a single conditional UPDATE in the same transaction, and the
(job_id, applicant_id) unique constraint is what actually prevents double
applies; the pre-check only exists to return a clear message quickly.
"""
import logging

from sqlalchemy import delete, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jobportal.enums import ApplicationStatus
from jobportal.errors import Conflict, Forbidden, NotFound
from jobportal.models.application import Application
from jobportal.models.job import Job
from jobportal.models.user import User
from jobportal.schemas.application import ApplicationFields
from jobportal.utils.ids import new_id, utc_now

logger = logging.getLogger(__name__)

ALREADY_APPLIED = "You have already applied for this job"


def _already_applied(db: Session, job_id: str, applicant_id: str) -> bool:
    return (
        db.query(Application.id)
        .filter(Application.job_id == job_id, Application.applicant_id == applicant_id)
        .first()
        is not None
    )


def _bump_count(db: Session, job_id: str) -> int:
    """Increment the job's counter; returns the number of job rows touched."""
    return db.execute(
        update(Job)
        .where(Job.id == job_id)
        .values(application_count=Job.application_count + 1)
        .execution_options(synchronize_session=False)
    ).rowcount


def apply_to_job(
    db: Session,
    job_id: str,
    applicant: User,
    fields: ApplicationFields,
    resume: str | None = None,
) -> Application:
    if db.get(Job, job_id) is None:
        raise NotFound("Job not found")

    if _already_applied(db, job_id, applicant.id):
        raise Conflict(ALREADY_APPLIED)

    now = utc_now()
    application = Application(
        id=new_id(),
        job_id=job_id,
        applicant_id=applicant.id,
        status=ApplicationStatus.PENDING,
        resume=resume,
        applied_at=now,
        created_at=now,
        updated_at=now,
        **fields.model_dump(include=set(ApplicationFields.model_fields)),
    )
    db.add(application)
    try:
        db.flush()
    except IntegrityError as exc:
        db.rollback()
        # Either a concurrent apply won the unique constraint or the job vanished
        if db.get(Job, job_id) is None:
            raise NotFound("Job not found") from exc
        raise Conflict(ALREADY_APPLIED) from exc

    if _bump_count(db, job_id) == 0:
        # Job deleted between the lookup and the increment: drop the insert too
        db.rollback()
        raise NotFound("Job not found")

    db.commit()
    db.refresh(application)
    logger.info("User %s applied to job %s (application %s)", applicant.id, job_id, application.id)
    return application


def get_application(db: Session, application_id: str) -> Application:
    application = db.get(Application, application_id)
    if application is None:
        raise NotFound("Application not found")
    return application


def delete_application(db: Session, application_id: str, actor: User) -> None:
    """Withdraw an application. Only the applicant or an admin may do this."""
    application = get_application(db, application_id)
    if application.applicant_id != actor.id and not actor.is_admin:
        raise Forbidden("Access denied")

    job_id = application.job_id
    deleted = db.execute(
        delete(Application)
        .where(Application.id == application_id)
        .execution_options(synchronize_session=False)
    ).rowcount
    if deleted == 0:
        # Someone else removed it first; their delete already decremented the counter
        db.rollback()
        raise NotFound("Application not found")

    db.execute(
        update(Job)
        .where(Job.id == job_id, Job.application_count > 0)
        .values(application_count=Job.application_count - 1)
        .execution_options(synchronize_session=False)
    )
    db.commit()
    db.expunge_all()
    logger.info("Application %s on job %s deleted by %s", application_id, job_id, actor.id)


def set_status(db: Session, application_id: str, status: ApplicationStatus) -> Application:
    # Any status may follow any other; reviewers can reopen decisions
    application = get_application(db, application_id)
    previous = application.status
    application.status = status
    application.updated_at = utc_now()
    db.commit()
    db.refresh(application)
    logger.info("Application %s status %s -> %s", application_id, previous.value, status.value)
    return application


def list_for_applicant(db: Session, applicant_id: str) -> list[Application]:
    return (
        db.query(Application)
        .filter(Application.applicant_id == applicant_id)
        .order_by(Application.created_at.desc())
        .all()
    )


def list_for_job(db: Session, job_id: str) -> list[Application]:
    return (
        db.query(Application)
        .filter(Application.job_id == job_id)
        .order_by(Application.created_at.desc())
        .all()
    )


def search_applications(
    db: Session,
    status: ApplicationStatus | None,
    search: str | None,
    page: int,
    limit: int,
) -> tuple[list[Application], int]:
    """Filter by status and by applicant name / job title / company, in SQL."""
    query = db.query(Application)
    if status is not None:
        query = query.filter(Application.status == status)
    if search:
        query = (
            query.join(User, Application.applicant_id == User.id)
            .join(Job, Application.job_id == Job.id)
            .filter(
                User.name.icontains(search, autoescape=True)
                | Job.title.icontains(search, autoescape=True)
                | Job.company.icontains(search, autoescape=True)
            )
        )
    total = query.count()
    applications = (
        query.order_by(Application.created_at.desc()).offset((page - 1) * limit).limit(limit).all()
    )
    return applications, total


def recent_applications(db: Session, limit: int = 5) -> list[Application]:
    return db.query(Application).order_by(Application.created_at.desc()).limit(limit).all()


def count_applications(db: Session, status: ApplicationStatus | None = None) -> int:
    query = db.query(Application)
    if status is not None:
        query = query.filter(Application.status == status)
    return query.count()
