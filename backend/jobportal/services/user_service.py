import logging

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jobportal.enums import Role
from jobportal.errors import InvalidArgument, NotFound
from jobportal.models.application import Application
from jobportal.models.job import Job
from jobportal.models.user import User
from jobportal.schemas.user import ProfileUpdate
from jobportal.utils.ids import new_id, utc_now
from jobportal.utils.security import hash_password, verify_password

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("phone", "address", "resume", "skills", "experience", "education")


def create_user(db: Session, name: str, email: str, password: str, role: Role = Role.USER) -> User:
    """Hash the password and insert a new user; duplicate emails are rejected."""
    email = email.strip().lower()
    if db.query(User.id).filter(User.email == email).first():
        raise InvalidArgument("User already exists")

    now = utc_now()
    user = User(
        id=new_id(),
        name=name.strip(),
        email=email,
        password_hash=hash_password(password),
        role=role,
        skills=[],
        created_at=now,
        updated_at=now,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        # Lost a race with a concurrent registration for the same email
        db.rollback()
        raise InvalidArgument("User already exists") from exc
    db.refresh(user)
    logger.info("Registered user %s with role %s", user.id, user.role.value)
    return user


def authenticate(db: Session, email: str, password: str) -> User:
    user = db.query(User).filter(User.email == email.strip().lower()).first()
    if user is None or not verify_password(user.password_hash, password):
        raise InvalidArgument("Invalid credentials")
    return user


def update_profile(db: Session, user: User, req: ProfileUpdate) -> User:
    if req.name is not None:
        user.name = req.name.strip()
    if req.email is not None and req.email != user.email:
        taken = db.query(User.id).filter(User.email == req.email, User.id != user.id).first()
        if taken:
            raise InvalidArgument("Email already in use")
        user.email = req.email
    if req.profile is not None:
        for key, value in req.profile.model_dump(exclude_unset=True).items():
            if key in PROFILE_FIELDS:
                setattr(user, key, value)
    user.updated_at = utc_now()

    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise InvalidArgument("Email already in use") from exc
    db.refresh(user)
    return user


def get_user(db: Session, user_id: str) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFound("User not found")
    return user


def list_users(db: Session, search: str | None, page: int, limit: int) -> tuple[list[User], int]:
    query = db.query(User)
    if search:
        query = query.filter(
            User.name.icontains(search, autoescape=True)
            | User.email.icontains(search, autoescape=True)
        )
    total = query.count()
    users = query.order_by(User.created_at.desc()).offset((page - 1) * limit).limit(limit).all()
    return users, total


def recent_users(db: Session, limit: int = 5) -> list[User]:
    return (
        db.query(User)
        .filter(User.role == Role.USER)
        .order_by(User.created_at.desc())
        .limit(limit)
        .all()
    )


def change_role(db: Session, user_id: str, role: Role) -> User:
    user = get_user(db, user_id)
    if user.role == Role.ADMIN and role != Role.ADMIN:
        admins = db.query(func.count(User.id)).filter(User.role == Role.ADMIN).scalar()
        if admins <= 1:
            raise InvalidArgument("Cannot demote the last admin user")

    user.role = role
    user.updated_at = utc_now()
    db.commit()
    db.refresh(user)
    logger.info("User %s role changed to %s", user.id, role.value)
    return user


def delete_user(db: Session, user_id: str) -> int:
    """Delete a non-admin user and their applications. Returns the number of applications removed."""
    user = get_user(db, user_id)
    if user.role == Role.ADMIN:
        raise InvalidArgument("Cannot delete admin user")
    if db.query(Job.id).filter(Job.posted_by == user.id).first():
        raise InvalidArgument("Cannot delete a user who still owns job postings")

    # Each job holds at most one application per user, so one decrement per job is exact
    applied_job_ids = select(Application.job_id).where(Application.applicant_id == user.id)
    db.execute(
        update(Job)
        .where(Job.id.in_(applied_job_ids), Job.application_count > 0)
        .values(application_count=Job.application_count - 1)
        .execution_options(synchronize_session=False)
    )
    removed = db.execute(
        delete(Application)
        .where(Application.applicant_id == user.id)
        .execution_options(synchronize_session=False)
    ).rowcount
    db.execute(delete(User).where(User.id == user.id).execution_options(synchronize_session=False))
    db.commit()
    db.expunge_all()
    logger.info("Deleted user %s and %d application(s)", user_id, removed)
    return removed
