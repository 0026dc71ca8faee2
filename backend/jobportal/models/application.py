from sqlalchemy import Column, Enum, ForeignKey, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from jobportal.database import Base
from jobportal.enums import ApplicationStatus


class Application(Base):
    __tablename__ = "applications"
    # One application per (job, applicant); the real guard against double applies
    __table_args__ = (UniqueConstraint("job_id", "applicant_id", name="uq_applications_job_applicant"),)

    id = Column(Text, primary_key=True)
    job_id = Column(Text, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    applicant_id = Column(Text, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(
        Enum(ApplicationStatus, native_enum=False, length=16, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=ApplicationStatus.PENDING,
    )
    cover_letter = Column(Text)
    resume = Column(Text)
    portfolio = Column(Text)
    linkedin = Column(Text)
    github = Column(Text)
    expected_salary = Column(Text)
    availability = Column(Text)
    additional_info = Column(Text)
    applied_at = Column(Text, nullable=False)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

    job = relationship("Job", lazy="joined")
    applicant = relationship("User", lazy="joined")
