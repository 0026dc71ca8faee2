from pydantic import Field, field_validator

from jobportal.enums import Role
from jobportal.models.user import User
from jobportal.schemas.common import CamelModel, SkillList


class RegisterRequest(CamelModel):
    name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    password: str = Field(min_length=6)
    role: Role = Role.USER

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, v: str) -> str:
        v = v.strip().lower()
        if "@" not in v:
            raise ValueError("Invalid email address")
        return v


class LoginRequest(CamelModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class ProfileFields(CamelModel):
    phone: str | None = None
    address: str | None = None
    resume: str | None = None
    skills: SkillList = None
    experience: str | None = None
    education: str | None = None



class ProfileUpdate(CamelModel):
    # password and role are deliberately absent: extra keys are ignored
    name: str | None = Field(default=None, min_length=1)
    email: str | None = None
    profile: ProfileFields | None = None

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip().lower()
        if "@" not in v:
            raise ValueError("Invalid email address")
        return v


class RoleUpdate(CamelModel):
    role: Role


class UserSummary(CamelModel):
    id: str
    name: str
    email: str
    role: Role


class UserResponse(CamelModel):
    id: str
    name: str
    email: str
    role: Role
    profile: ProfileFields
    created_at: str
    updated_at: str


class AuthResponse(CamelModel):
    message: str
    token: str
    user: UserSummary


class UserEnvelope(CamelModel):
    message: str
    user: UserResponse


class UserListResponse(CamelModel):
    users: list[UserResponse]
    total_pages: int
    current_page: int
    total: int


def user_to_summary(user: User) -> UserSummary:
    return UserSummary(id=user.id, name=user.name, email=user.email, role=user.role)


def profile_of(user: User) -> ProfileFields:
    return ProfileFields(
        phone=user.phone,
        address=user.address,
        resume=user.resume,
        skills=user.skills or [],
        experience=user.experience,
        education=user.education,
    )


def user_to_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        role=user.role,
        profile=profile_of(user),
        created_at=user.created_at,
        updated_at=user.updated_at,
    )
