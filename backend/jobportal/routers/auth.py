import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from jobportal.config import Settings
from jobportal.database import get_db
from jobportal.dependencies import get_current_user, get_settings
from jobportal.enums import Role
from jobportal.errors import Forbidden
from jobportal.models.user import User
from jobportal.schemas.user import (
    AuthResponse,
    LoginRequest,
    ProfileUpdate,
    RegisterRequest,
    UserEnvelope,
    UserResponse,
    user_to_response,
    user_to_summary,
)
from jobportal.services import user_service
from jobportal.utils.security import create_access_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(
    req: RegisterRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    if req.role == Role.ADMIN and not settings.allow_admin_registration:
        raise Forbidden("Admin accounts cannot be self-registered")

    user = user_service.create_user(db, req.name, req.email, req.password, req.role)
    return AuthResponse(
        message="User registered successfully",
        token=create_access_token(user.id, settings),
        user=user_to_summary(user),
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    req: LoginRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    user = user_service.authenticate(db, req.email, req.password)
    logger.info("User %s logged in", user.id)
    return AuthResponse(
        message="Login successful",
        token=create_access_token(user.id, settings),
        user=user_to_summary(user),
    )


@router.get("/profile", response_model=UserResponse)
async def get_profile(user: User = Depends(get_current_user)):
    return user_to_response(user)


@router.put("/profile", response_model=UserEnvelope)
async def update_profile(
    req: ProfileUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    user = user_service.update_profile(db, user, req)
    return UserEnvelope(message="Profile updated successfully", user=user_to_response(user))
