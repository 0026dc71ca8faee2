import logging

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from jobportal.enums import JobType
from jobportal.errors import NotFound
from jobportal.models.application import Application
from jobportal.models.job import Job
from jobportal.models.user import User
from jobportal.schemas.job import JobCreate, JobUpdate
from jobportal.utils.ids import new_id, utc_now

logger = logging.getLogger(__name__)


def list_jobs(
    db: Session,
    search: str | None = None,
    location: str | None = None,
    job_type: JobType | None = None,
    category: str | None = None,
    page: int = 1,
    limit: int = 10,
) -> tuple[list[Job], int]:
    """Active jobs matching the filters, newest first."""
    query = db.query(Job).filter(Job.is_active.is_(True))

    if search:
        query = query.filter(
            Job.title.icontains(search, autoescape=True)
            | Job.company.icontains(search, autoescape=True)
            | Job.description.icontains(search, autoescape=True)
        )
    if location:
        query = query.filter(Job.location.icontains(location, autoescape=True))
    if job_type:
        query = query.filter(Job.type == job_type)
    if category:
        query = query.filter(Job.category.icontains(category, autoescape=True))

    total = query.count()
    jobs = query.order_by(Job.created_at.desc()).offset((page - 1) * limit).limit(limit).all()
    return jobs, total


def list_all_jobs(db: Session, search: str | None, page: int, limit: int) -> tuple[list[tuple[Job, int]], int]:
    """Every job, active or not, paired with its live application count."""
    live_count = (
        select(func.count(Application.id))
        .where(Application.job_id == Job.id)
        .correlate(Job)
        .scalar_subquery()
    )
    query = db.query(Job)
    if search:
        query = query.filter(
            Job.title.icontains(search, autoescape=True)
            | Job.company.icontains(search, autoescape=True)
        )
    total = query.count()
    rows = (
        query.add_columns(live_count.label("live_count"))
        .order_by(Job.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return [(job, count) for job, count in rows], total


def job_stats(db: Session) -> dict:
    active = Job.is_active.is_(True)
    return {
        "total_jobs": db.query(func.count(Job.id)).filter(active).scalar(),
        "total_companies": db.query(func.count(func.distinct(Job.company))).filter(active).scalar(),
        "total_applications": db.query(func.count(Application.id)).scalar(),
    }


def get_job(db: Session, job_id: str) -> Job:
    job = db.get(Job, job_id)
    if job is None:
        raise NotFound("Job not found")
    return job


def create_job(db: Session, req: JobCreate, poster: User, company_logo: str | None = None) -> Job:
    now = utc_now()
    job = Job(
        id=new_id(),
        **req.model_dump(exclude={"skills"}),
        skills=req.skills or [],
        company_logo=company_logo,
        posted_by=poster.id,
        application_count=0,
        created_at=now,
        updated_at=now,
    )
    db.add(job)
    db.commit()
    db.refresh(job)
    logger.info("Job %s (%s at %s) posted by %s", job.id, job.title, job.company, poster.id)
    return job


def update_job(db: Session, job_id: str, req: JobUpdate, company_logo: str | None = None) -> Job:
    job = get_job(db, job_id)

    for key, value in req.model_dump(exclude_unset=True).items():
        # Required columns cannot be cleared through a partial update
        if value is None and key in ("title", "company", "location", "type", "description", "is_active"):
            continue
        if key == "skills":
            value = value or []
        setattr(job, key, value)
    if company_logo:
        job.company_logo = company_logo
    job.updated_at = utc_now()

    db.commit()
    db.refresh(job)
    return job


def delete_job(db: Session, job_id: str) -> int:
    """Delete a job and every application referencing it in one transaction.

    Returns the number of applications removed.
    """
    get_job(db, job_id)
    removed = db.query(func.count(Application.id)).filter(Application.job_id == job_id).scalar()

    db.execute(delete(Job).where(Job.id == job_id).execution_options(synchronize_session=False))
    # Foreign keys cascade where the store enforces them; delete explicitly for the rest
    db.execute(
        delete(Application)
        .where(Application.job_id == job_id)
        .execution_options(synchronize_session=False)
    )
    db.commit()
    db.expunge_all()
    logger.info("Deleted job %s and %d application(s)", job_id, removed)
    return removed
