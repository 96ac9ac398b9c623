"""Authentication endpoints: login, token verification, password change."""

from datetime import datetime, timezone

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from vrpa.api.deps import get_current_user
from vrpa.core.config import settings
from vrpa.core.errors import Unauthorized, ValidationFailure
from vrpa.core.security import create_access_token, hash_password, verify_password
from vrpa.database.connection import get_database
from vrpa.models.user import User
from vrpa.schemas.auth import ChangePasswordRequest, LoginRequest, LoginResponse, UserResponse

logger = structlog.get_logger(__name__)
router = APIRouter(tags=["auth"])


@router.post("/auth/login", response_model=LoginResponse)
def login(request: LoginRequest, db: Session = Depends(get_database)):
    """Exchange username and password for a bearer token."""
    if not request.username or not request.password:
        raise ValidationFailure({"username": "Username and password are required"})

    user = db.query(User).filter(User.username == request.username).first()
    if not user or not verify_password(request.password, user.password_hash):
        logger.warning("Failed login", username=request.username)
        raise Unauthorized("Invalid credentials")

    logger.info("User logged in", user_id=user.id)
    return LoginResponse(
        token=create_access_token(user.id, user.username),
        user=UserResponse.model_validate(user),
    )


@router.get("/auth/verify")
def verify(user: User = Depends(get_current_user)):
    return {"valid": True, "user": UserResponse.model_validate(user)}


@router.post("/auth/change-password")
def change_password(
    request: ChangePasswordRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_database),
):
    if not request.current_password or not request.new_password:
        raise ValidationFailure({"new_password": "Current and new password are required"})

    if len(request.new_password) < settings.min_password_length:
        raise ValidationFailure({
            "new_password": f"Password must be at least {settings.min_password_length} characters"
        })

    if not verify_password(request.current_password, user.password_hash):
        raise Unauthorized("Current password is incorrect")

    user.password_hash = hash_password(request.new_password)
    user.updated_at = datetime.now(timezone.utc)
    db.commit()

    logger.info("Password changed", user_id=user.id)
    return {"success": True, "message": "Password changed successfully"}
