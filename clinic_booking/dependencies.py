# clinic_booking/dependencies.py
"""
FastAPI dependencies: store, services and the bearer-token user.

Tests swap the store / event sink / holiday source through
app.dependency_overrides.
"""
from typing import Optional

from fastapi import Depends, Header, HTTPException, status

from .database import JsonStore, store
from .errors import PermissionDeniedError
from .models import Role, User
from .services.appointments import AppointmentService
from .services.blocked_slots import BlockedSlotService
from .services.holidays import fetch_holidays
from .services.notifications import Notifier
from .services.realtime import EventSink, broadcaster
from .services.users import UserService


def get_store() -> JsonStore:
    return store


def get_event_sink() -> EventSink:
    return broadcaster


def get_notifier(db: JsonStore = Depends(get_store)) -> Notifier:
    return Notifier(db)


def get_holiday_source():
    return fetch_holidays


def get_appointment_service(
    db: JsonStore = Depends(get_store),
    events: EventSink = Depends(get_event_sink),
    notifier: Notifier = Depends(get_notifier),
) -> AppointmentService:
    return AppointmentService(db, events, notifier)


def get_blocked_slot_service(
    db: JsonStore = Depends(get_store),
    events: EventSink = Depends(get_event_sink),
    notifier: Notifier = Depends(get_notifier),
    holiday_source=Depends(get_holiday_source),
) -> BlockedSlotService:
    return BlockedSlotService(db, events, notifier, holiday_source=holiday_source)


def get_user_service(db: JsonStore = Depends(get_store)) -> UserService:
    return UserService(db)


def _token_from_header(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    parts = authorization.split(" ")
    if len(parts) == 2 and parts[0] == "Bearer":
        return parts[1]
    # no "Bearer" prefix: the whole header is the token
    return authorization


def get_current_user(
    authorization: Optional[str] = Header(default=None),
    users: UserService = Depends(get_user_service),
) -> User:
    token = _token_from_header(authorization)
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    user = users.get_by_token(token)
    if user is None:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid token")
    return user


def require_editor(user: User = Depends(get_current_user)) -> User:
    if user.role == Role.viewer:
        raise PermissionDeniedError("Viewer accounts cannot modify data.")
    return user


def require_admin(user: User = Depends(get_current_user)) -> User:
    if user.role != Role.admin:
        raise PermissionDeniedError("This operation is restricted to administrators.")
    return user
