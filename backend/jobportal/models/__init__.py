from jobportal.models.user import User
from jobportal.models.job import Job
from jobportal.models.application import Application

__all__ = ["User", "Job", "Application"]
