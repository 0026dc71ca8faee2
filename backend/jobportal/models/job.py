from sqlalchemy import JSON, Boolean, Column, Enum, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship

from jobportal.database import Base
from jobportal.enums import ExperienceLevel, JobType


def _values(enum_cls):
    return [m.value for m in enum_cls]


class Job(Base):
    __tablename__ = "jobs"

    id = Column(Text, primary_key=True)
    title = Column(Text, nullable=False)
    company = Column(Text, nullable=False)
    location = Column(Text, nullable=False)
    type = Column(Enum(JobType, native_enum=False, length=16, values_callable=_values), nullable=False)
    salary = Column(Text)
    description = Column(Text, nullable=False)
    requirements = Column(Text)
    benefits = Column(Text)
    skills = Column(JSON, default=list)
    experience = Column(Enum(ExperienceLevel, native_enum=False, length=16, values_callable=_values))
    category = Column(Text)
    company_logo = Column(Text)
    application_deadline = Column(Text)
    contact_email = Column(Text)
    posted_by = Column(Text, ForeignKey("users.id"), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    application_count = Column(Integer, nullable=False, default=0)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

    poster = relationship("User", lazy="joined")
