from pydantic import Field

from jobportal.enums import ExperienceLevel, JobType
from jobportal.models.job import Job
from jobportal.schemas.common import CamelModel, FormModel, SkillList


class JobCreate(FormModel):
    title: str = Field(min_length=1)
    company: str = Field(min_length=1)
    location: str = Field(min_length=1)
    type: JobType
    description: str = Field(min_length=1)
    salary: str | None = None
    requirements: str | None = None
    benefits: str | None = None
    skills: SkillList = None
    experience: ExperienceLevel | None = None
    category: str | None = None
    application_deadline: str | None = None
    contact_email: str | None = None
    is_active: bool = True


class JobUpdate(FormModel):
    title: str | None = Field(default=None, min_length=1)
    company: str | None = Field(default=None, min_length=1)
    location: str | None = Field(default=None, min_length=1)
    type: JobType | None = None
    description: str | None = Field(default=None, min_length=1)
    salary: str | None = None
    requirements: str | None = None
    benefits: str | None = None
    skills: SkillList = None
    experience: ExperienceLevel | None = None
    category: str | None = None
    application_deadline: str | None = None
    contact_email: str | None = None
    is_active: bool | None = None


class PosterResponse(CamelModel):
    id: str
    name: str
    email: str


class JobResponse(CamelModel):
    id: str
    title: str
    company: str
    location: str
    type: JobType
    salary: str | None
    description: str
    requirements: str | None
    benefits: str | None
    skills: list[str]
    experience: ExperienceLevel | None
    category: str | None
    company_logo: str | None
    application_deadline: str | None
    contact_email: str | None
    posted_by: PosterResponse | None
    is_active: bool
    application_count: int
    created_at: str
    updated_at: str


class JobListResponse(CamelModel):
    jobs: list[JobResponse]
    total_pages: int
    current_page: int
    total: int


class JobStatsResponse(CamelModel):
    total_jobs: int
    total_companies: int
    total_applications: int


def job_to_response(job: Job, application_count: int | None = None) -> JobResponse:
    poster = job.poster
    return JobResponse(
        id=job.id,
        title=job.title,
        company=job.company,
        location=job.location,
        type=job.type,
        salary=job.salary,
        description=job.description,
        requirements=job.requirements,
        benefits=job.benefits,
        skills=job.skills or [],
        experience=job.experience,
        category=job.category,
        company_logo=job.company_logo,
        application_deadline=job.application_deadline,
        contact_email=job.contact_email,
        posted_by=PosterResponse(id=poster.id, name=poster.name, email=poster.email) if poster else None,
        is_active=job.is_active,
        application_count=job.application_count if application_count is None else application_count,
        created_at=job.created_at,
        updated_at=job.updated_at,
    )
