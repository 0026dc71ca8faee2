from jobportal.schemas.common import CamelModel
from jobportal.schemas.job import JobResponse


class AdminStatsResponse(CamelModel):
    total_users: int
    total_jobs: int
    total_applications: int
    pending_applications: int


class AdminJobListResponse(CamelModel):
    jobs: list[JobResponse]
    total_pages: int
    current_page: int
    total: int
