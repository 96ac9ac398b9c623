"""Common API dependencies: repositories, lifecycle manager, current user, monitor."""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from vrpa.collectors.ping_collector import PingMonitor
from vrpa.core.errors import NotFoundError, Unauthorized
from vrpa.core.security import decode_token
from vrpa.database.connection import get_database
from vrpa.models.user import User
from vrpa.repositories.base import Repositories
from vrpa.repositories.sql import SqlRepositories
from vrpa.schemas.device import Device
from vrpa.services.lifecycle import DeviceLifecycleManager

bearer_scheme = HTTPBearer(auto_error=False)


def get_repositories(db: Session = Depends(get_database)) -> Repositories:
    return SqlRepositories(db)


def get_lifecycle_manager(repos: Repositories = Depends(get_repositories)) -> DeviceLifecycleManager:
    return DeviceLifecycleManager(repos)


def get_monitor(request: Request) -> PingMonitor:
    return request.app.state.monitor


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_database),
) -> User:
    """Extract and validate user from JWT access token."""
    if credentials is None:
        raise Unauthorized("No token provided")

    try:
        payload = decode_token(credentials.credentials)
    except Exception:
        raise Unauthorized("Invalid or expired token")

    if payload.get("type") != "access":
        raise Unauthorized("Invalid token type")

    user = db.get(User, payload.get("sub"))
    if not user:
        raise Unauthorized("User not found")
    return user


def load_device(repos: Repositories, device_id: str) -> Device:
    device = repos.devices.get(device_id)
    if device is None:
        raise NotFoundError("Device", device_id)
    return device
