# clinic_booking/services/users.py
from __future__ import annotations

import logging
import secrets
from typing import Callable, Optional

from pydantic import ValidationError as SchemaError

from ..config import settings
from ..errors import AuthenticationError, ConflictError, NotFoundError, NotificationError, ValidationError
from ..models import User
from .mailer import send_email

logger = logging.getLogger(__name__)

REQUIRED_USER_FIELDS = ("userId", "name", "department", "email", "role")


def _temp_password() -> str:
    return secrets.token_urlsafe(6)[:8]


class UserService:
    """
    Accounts and the opaque-token login. The token handed out is the userId
    itself; get_by_token resolves it back to an active user.
    """

    def __init__(self, store, send: Callable[..., dict] = send_email):
        self.store = store
        self._send = send

    def get_by_token(self, token: str) -> Optional[User]:
        user = self.store.read().users.get(token)
        if user is None or user.is_deleted:
            return None
        return user

    def login(self, user_id: str, password: Optional[str]) -> dict:
        user = self.get_by_token(user_id)
        if user is None or user.password != password:
            raise AuthenticationError("Incorrect user ID or password.")
        logger.info("Login: %s", user_id)
        return {
            "token": user.user_id,
            "user": user.public_dict(),
            "mustChangePassword": user.must_change_password,
        }

    def set_password(self, user_id: str, new_password: str) -> None:
        if not new_password:
            raise ValidationError("New password is required.")
        with self.store.transaction() as db:
            user = db.users.get(user_id)
            if user is None:
                raise NotFoundError("User not found.")
            user.password = new_password
            user.must_change_password = False
        logger.info("Password changed: %s", user_id)

    def list(self) -> list[dict]:
        return [u.public_dict() for u in self.store.read().users.active()]

    def create(self, data: dict) -> dict:
        if any(not data.get(f) for f in REQUIRED_USER_FIELDS):
            raise ValidationError("All fields are required.")
        password = _temp_password()
        with self.store.transaction() as db:
            if db.users.get(data["userId"]) is not None:
                raise ConflictError("This user ID is already in use.")
            try:
                user = User.model_validate({
                    **{f: data[f] for f in REQUIRED_USER_FIELDS},
                    "password": password,
                    "mustChangePassword": True,
                    "isDeleted": False,
                })
            except SchemaError as e:
                raise ValidationError(f"Invalid user data: {e.errors()[0].get('msg')}")
            db.users.insert(user)

        logger.info("User created: %s role=%s", user.user_id, user.role.value)
        result = user.public_dict()
        try:
            self._send([user.email], *self._welcome(user, password))
        except NotificationError as e:
            logger.warning("Account email to %s failed: %s", user.email, e)
            result["email_status"] = "failed"
        return result

    def _welcome(self, user: User, password: str) -> tuple[str, str, str]:
        subject = "Your account has been created - Clinic Booking System"
        text = (
            "Your new account has been created.\n\n"
            f"User ID: {user.user_id}\n"
            f"Temporary password: {password}\n\n"
            "Please change your password the first time you log in.\n"
            f"System URL: {settings.SYSTEM_URL}"
        )
        html = (
            "<p>Your new account has been created.</p>"
            f"<p><strong>User ID:</strong> {user.user_id}</p>"
            f"<p><strong>Temporary password:</strong> {password}</p>"
            "<p>Please change your password the first time you log in.</p>"
            f'<p>Open the system <a href="{settings.SYSTEM_URL}">here</a>.</p>'
        )
        return subject, text, html

    def update(self, user_id: str, data: dict) -> dict:
        changes = {k: v for k, v in data.items() if k not in ("userId", "password", "isDeleted")}
        with self.store.transaction() as db:
            current = db.users.get(user_id)
            if current is None:
                raise NotFoundError("User not found.")
            merged = {**current.to_dict(), **changes}
            # an empty role keeps the current one
            merged["role"] = changes.get("role") or current.role.value
            try:
                user = User.model_validate(merged)
            except SchemaError as e:
                raise ValidationError(f"Invalid user data: {e.errors()[0].get('msg')}")
            db.users.replace(user)
        logger.info("User updated: %s", user_id)
        return user.public_dict()

    def delete(self, user_id: str, actor: str) -> None:
        with self.store.transaction() as db:
            user = db.users.get(user_id)
            if user is None:
                raise NotFoundError("User not found.")
            user.is_deleted = True
            user.last_updated_by = actor
        logger.info("User deleted: %s by=%s", user_id, actor)
