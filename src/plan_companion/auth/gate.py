# src/plan_companion/auth/gate.py

"""
Authentication gate.

Owns registration, login/logout and caller resolution. Every protected
operation first calls `resolve_caller(token)`; the returned owner id then
scopes every store query.
"""

from __future__ import annotations

import asyncio
import logging

from ..core.errors import InternalError, Unauthorized, ValidationError
from ..core.ports import SessionStore, UserRepo
from ..plans.plan_models import User
from .passwords import DEFAULT_ITERATIONS, hash_password, verify_password
from .user_store import DuplicateUsername

logger = logging.getLogger(__name__)


class AuthGate:
    def __init__(
        self,
        users: UserRepo,
        sessions: SessionStore,
        *,
        hash_iterations: int = DEFAULT_ITERATIONS,
    ) -> None:
        self._users = users
        self._sessions = sessions
        self._iterations = int(hash_iterations)
        # Verified against when the username is unknown, so a miss costs the same as a hit.
        self._dummy_hash = hash_password("not-a-real-password", iterations=self._iterations)

    async def register(self, username: str, password: str) -> tuple[User, str]:
        """Create a user and open a session for it. Returns (user, session token)."""
        username = (username or "").strip()
        if not username or not password:
            raise ValidationError("Invalid user data")

        password_hash = await asyncio.to_thread(hash_password, password, iterations=self._iterations)
        try:
            user = await asyncio.to_thread(
                self._users.create_user, username=username, password_hash=password_hash
            )
        except DuplicateUsername:
            raise ValidationError("Username already exists") from None
        except Exception as e:
            logger.exception("Registration failed username=%s", username)
            raise InternalError("Failed to register user") from e

        token = self._sessions.create(user.id)
        return user, token

    async def login(self, username: str, password: str) -> tuple[User, str]:
        username = (username or "").strip()
        if not username or not password:
            raise ValidationError("Username and password are required")

        try:
            user = await asyncio.to_thread(self._users.get_user_by_username, username)
        except Exception as e:
            logger.exception("Login lookup failed username=%s", username)
            raise InternalError("Failed to login") from e

        stored = user.password_hash if user is not None else self._dummy_hash
        ok = await asyncio.to_thread(verify_password, password, stored)
        if user is None or not ok:
            logger.info("Login rejected username=%s", username)
            raise Unauthorized("Invalid username or password")

        token = self._sessions.create(user.id)
        logger.info("Login ok user_id=%s", user.id)
        return user, token

    def logout(self, token: str | None) -> None:
        if token:
            self._sessions.revoke(token)

    def resolve_caller(self, token: str | None) -> str:
        owner_id = self._sessions.resolve(token) if token else None
        if not owner_id:
            raise Unauthorized()
        return owner_id

    async def current_user(self, token: str | None) -> User:
        owner_id = self.resolve_caller(token)
        try:
            user = await asyncio.to_thread(self._users.get_user, owner_id)
        except Exception as e:
            logger.exception("current_user lookup failed user_id=%s", owner_id)
            raise InternalError("Failed to get current user") from e
        if user is None:
            # Session outlived its user.
            self.logout(token)
            raise Unauthorized("Not authenticated")
        return user
