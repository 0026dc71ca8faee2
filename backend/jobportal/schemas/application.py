from pydantic import Field

from jobportal.enums import ApplicationStatus
from jobportal.models.application import Application
from jobportal.schemas.common import CamelModel, FormModel
from jobportal.schemas.job import JobResponse, job_to_response
from jobportal.schemas.user import ProfileFields, profile_of


class ApplicationFields(FormModel):
    cover_letter: str | None = None
    portfolio: str | None = None
    linkedin: str | None = None
    github: str | None = None
    expected_salary: str | None = None
    availability: str | None = None
    additional_info: str | None = None


class ApplicationCreate(ApplicationFields):
    job_id: str = Field(min_length=1)
    cover_letter: str = Field(min_length=1)


class StatusUpdate(CamelModel):
    status: ApplicationStatus


class ApplicantResponse(CamelModel):
    id: str
    name: str
    email: str
    profile: ProfileFields | None = None


class ApplicationResponse(CamelModel):
    id: str
    job_id: str
    applicant_id: str
    job: JobResponse | None
    applicant: ApplicantResponse | None
    status: ApplicationStatus
    cover_letter: str | None
    resume: str | None
    portfolio: str | None
    linkedin: str | None
    github: str | None
    expected_salary: str | None
    availability: str | None
    additional_info: str | None
    applied_at: str
    created_at: str
    updated_at: str


class ApplicationEnvelope(CamelModel):
    message: str
    application: ApplicationResponse


class MyApplicationsResponse(CamelModel):
    applications: list[ApplicationResponse]


class ApplicationPage(CamelModel):
    applications: list[ApplicationResponse]
    total_pages: int
    current_page: int
    total: int


def application_to_response(app: Application, with_profile: bool = False) -> ApplicationResponse:
    applicant = None
    if app.applicant is not None:
        applicant = ApplicantResponse(
            id=app.applicant.id,
            name=app.applicant.name,
            email=app.applicant.email,
            profile=profile_of(app.applicant) if with_profile else None,
        )
    return ApplicationResponse(
        id=app.id,
        job_id=app.job_id,
        applicant_id=app.applicant_id,
        job=job_to_response(app.job) if app.job is not None else None,
        applicant=applicant,
        status=app.status,
        cover_letter=app.cover_letter,
        resume=app.resume,
        portfolio=app.portfolio,
        linkedin=app.linkedin,
        github=app.github,
        expected_salary=app.expected_salary,
        availability=app.availability,
        additional_info=app.additional_info,
        applied_at=app.applied_at,
        created_at=app.created_at,
        updated_at=app.updated_at,
    )
