"""Bootstrap data: the first admin account and a handful of sample jobs.

    python -m jobportal.seed admin --email admin@example.com --password s3cret!
    python -m jobportal.seed jobs --count 10
"""
import argparse
import contextlib
import logging

from sqlalchemy.orm import Session

from jobportal.config import Settings
from jobportal.database import get_engine, init_db, make_session_factory
from jobportal.enums import ExperienceLevel, JobType, Role
from jobportal.models.user import User
from jobportal.schemas.job import JobCreate
from jobportal.services import job_service, user_service

logger = logging.getLogger(__name__)

SAMPLE_JOBS = [
    {
        "title": "Senior React Developer",
        "company": "TechCorp Solutions",
        "location": "New York, NY",
        "type": JobType.FULL_TIME,
        "salary": "$120,000 - $150,000",
        "description": "Build and maintain customer-facing web applications with React and TypeScript.",
        "requirements": "5+ years of frontend experience; strong React and TypeScript skills.",
        "benefits": "Health insurance, 401k, remote-friendly",
        "skills": ["React", "TypeScript", "Redux"],
        "experience": ExperienceLevel.SENIOR,
        "category": "Engineering",
    },
    {
        "title": "Backend Python Engineer",
        "company": "DataFlow Inc",
        "location": "Remote",
        "type": JobType.FULL_TIME,
        "salary": "$110,000 - $140,000",
        "description": "Design REST APIs and data pipelines in Python.",
        "skills": ["Python", "FastAPI", "PostgreSQL"],
        "experience": ExperienceLevel.MID,
        "category": "Engineering",
    },
    {
        "title": "UI/UX Designer",
        "company": "Creative Minds Studio",
        "location": "San Francisco, CA",
        "type": JobType.CONTRACT,
        "salary": "$60/hour",
        "description": "Own the design system and user research for our mobile products.",
        "skills": ["Figma", "User Research", "Prototyping"],
        "experience": ExperienceLevel.MID,
        "category": "Design",
    },
    {
        "title": "Marketing Intern",
        "company": "GrowthLab",
        "location": "Austin, TX",
        "type": JobType.INTERNSHIP,
        "description": "Support campaigns, content calendars and analytics reporting.",
        "skills": ["Content", "Analytics"],
        "experience": ExperienceLevel.ENTRY,
        "category": "Marketing",
    },
    {
        "title": "DevOps Engineer",
        "company": "CloudScale",
        "location": "Seattle, WA",
        "type": JobType.PART_TIME,
        "description": "Run Kubernetes clusters and CI/CD pipelines for a growing platform team.",
        "skills": ["Kubernetes", "Terraform", "AWS"],
        "experience": ExperienceLevel.SENIOR,
        "category": "Engineering",
    },
    {
        "title": "Technical Writer",
        "company": "DocuWorks",
        "location": "Remote",
        "type": JobType.FREELANCE,
        "description": "Write API guides and tutorials for developer audiences.",
        "skills": ["Writing", "Markdown", "APIs"],
        "experience": ExperienceLevel.MID,
        "category": "Content",
    },
]


def create_admin(db: Session, name: str, email: str, password: str) -> User:
    existing = db.query(User).filter(User.role == Role.ADMIN).first()
    if existing:
        logger.info("Admin user already exists: %s <%s>", existing.name, existing.email)
        return existing
    admin = user_service.create_user(db, name, email, password, Role.ADMIN)
    logger.info("Admin user created: %s. Change the password after first login.", admin.email)
    return admin


def create_sample_jobs(db: Session, count: int) -> int:
    admin = db.query(User).filter(User.role == Role.ADMIN).order_by(User.created_at).first()
    if admin is None:
        raise SystemExit("No admin user found. Run `python -m jobportal.seed admin` first.")

    created = 0
    for i in range(count):
        job_service.create_job(db, JobCreate(**SAMPLE_JOBS[i % len(SAMPLE_JOBS)]), admin)
        created += 1
    logger.info("Created %d sample job(s) owned by %s", created, admin.email)
    return created


def main(argv: list[str] | None = None):
    parser = argparse.ArgumentParser(prog="python -m jobportal.seed", description=__doc__.splitlines()[0])
    sub = parser.add_subparsers(dest="command", required=True)

    admin_cmd = sub.add_parser("admin", help="create the first admin account")
    admin_cmd.add_argument("--name", default="admin")
    admin_cmd.add_argument("--email", required=True)
    admin_cmd.add_argument("--password", required=True)

    jobs_cmd = sub.add_parser("jobs", help="insert sample job postings")
    jobs_cmd.add_argument("--count", type=int, default=len(SAMPLE_JOBS))

    args = parser.parse_args(argv)

    settings = Settings()
    logging.basicConfig(level=settings.log_level.upper())
    engine = get_engine(settings)
    init_db(engine)
    session_factory = make_session_factory(engine)

    with contextlib.closing(session_factory()) as db:
        if args.command == "admin":
            create_admin(db, args.name, args.email, args.password)
        else:
            create_sample_jobs(db, args.count)
    engine.dispose()


if __name__ == "__main__":
    main()
