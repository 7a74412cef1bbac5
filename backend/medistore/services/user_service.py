# Overview: Advisory user list (admin / staff roles); not an authentication layer.

from __future__ import annotations

import logging

from ..errors import DuplicateUser, InvalidField, LastAdminRequired, UserNotFound
from ..records import ROLE_ADMIN, ROLE_STAFF, USER_ROLES, User, new_id
from ..storage import RecordStore
from ..time_utils import now_iso
from ..validation import require_text

logger = logging.getLogger(__name__)

DEFAULT_ADMIN_ID = "user_admin_default"
DEFAULT_ADMIN_EMAIL = "admin@medistore.com"


def _check_role(role: str) -> str:
    if role not in USER_ROLES:
        raise InvalidField("role", f"Role must be one of: {', '.join(USER_ROLES)}")
    return role


class UserDirectory:
    def __init__(self, store: RecordStore):
        self.store = store

    def _save(self, users: list[User]) -> None:
        self.store.save("users", [u.to_dict() for u in users])

    def list_users(self) -> list[User]:
        """Current users; seeds the default admin when the list is empty."""
        users = [User.from_dict(u) for u in self.store.load("users")]
        if users:
            return users
        admin = User(id=DEFAULT_ADMIN_ID, email=DEFAULT_ADMIN_EMAIL, role=ROLE_ADMIN, created_at=now_iso())
        with self.store.write_lock:
            self._save([admin])
        logger.info("Seeded default admin %s", DEFAULT_ADMIN_EMAIL)
        return [admin]

    def add_user(self, email: str, role: str = ROLE_STAFF) -> User:
        email = require_text(email, "email")
        if "@" not in email:
            raise InvalidField("email", "Enter a valid email address")
        role = _check_role(role)
        with self.store.write_lock:
            users = self.list_users()
            if any(u.email.lower() == email.lower() for u in users):
                raise DuplicateUser(email)
            user = User(id=new_id("user"), email=email, role=role, created_at=now_iso())
            users.append(user)
            self._save(users)
        return user

    def update_role(self, user_id: str, role: str) -> User:
        role = _check_role(role)
        with self.store.write_lock:
            users = self.list_users()
            user = next((u for u in users if u.id == user_id), None)
            if user is None:
                raise UserNotFound(user_id)
            admins = [u for u in users if u.role == ROLE_ADMIN]
            if user.role == ROLE_ADMIN and role != ROLE_ADMIN and len(admins) <= 1:
                raise LastAdminRequired()
            user.role = role
            self._save(users)
        return user

    def delete_user(self, user_id: str) -> None:
        with self.store.write_lock:
            users = self.list_users()
            user = next((u for u in users if u.id == user_id), None)
            if user is None:
                raise UserNotFound(user_id)
            admins = [u for u in users if u.role == ROLE_ADMIN]
            if user.role == ROLE_ADMIN and len(admins) <= 1:
                raise LastAdminRequired()
            self._save([u for u in users if u.id != user_id])
