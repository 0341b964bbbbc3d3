"""Repository for user records."""

from __future__ import annotations

import logging

from ..errors import ValidationError
from ..models import User
from .base import BaseRepository

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository):
    """Create, look up and cascade-delete ``User`` records."""

    def create(self, *, username: str, email: str, password_hash: str) -> User:
        """Append a new user and persist.

        Uniqueness is not checked here; callers do that before creating.
        """
        missing = [
            name
            for name, value in (("username", username), ("email", email), ("password_hash", password_hash))
            if not value or not value.strip()
        ]
        if missing:
            raise ValidationError("Missing required user fields.", details={"fields": missing})

        user = User(
            id=self.store.next_id("user"),
            username=username,
            email=email,
            password_hash=password_hash,
            created_at=self.store.now(),
        )
        self.store.users.append(user)
        self.store.commit()
        return user

    def get(self, user_id: int) -> User | None:
        return next((user for user in self.store.users if user.id == user_id), None)

    def get_by_email(self, email: str) -> User | None:
        return next((user for user in self.store.users if user.email == email), None)

    def get_by_username(self, username: str) -> User | None:
        return next((user for user in self.store.users if user.username == username), None)

    def list(self) -> list[User]:
        return list(self.store.users)

    def delete_cascade(self, user_id: int) -> User | None:
        """Remove a user together with all of its tasks, then persist once."""
        user = self.get(user_id)
        if user is None:
            return None
        before = len(self.store.tasks)
        self.store.tasks = [task for task in self.store.tasks if task.user_id != user_id]
        self.store.users = [existing for existing in self.store.users if existing.id != user_id]
        self.store.commit()
        logger.info(
            "User deleted with cascade.",
            extra={"user_id": user_id, "tasks_removed": before - len(self.store.tasks)},
        )
        return user
