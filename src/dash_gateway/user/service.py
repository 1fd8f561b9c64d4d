"""Authentication service: register, authenticate, change password.

Storage goes through the injected UserStore; transactions are managed by the
caller (router layer) via ``async with db.begin()``. Key derivation is
CPU-bound and runs in a worker thread so the event loop keeps serving.
"""

import asyncio
import logging

from src.dash_common.errors import (
    CredentialConfigError,
    EmailExistsError,
    InvalidCredentialsError,
    InvalidSecretError,
)
from src.dash_gateway.auth.config import AuthConfig
from src.dash_gateway.auth.password import CredentialHasher
from src.dash_gateway.user.store import UserCredential, UserStore

logger = logging.getLogger("dash.auth")


class AuthService:
    """Stateless apart from its collaborators; safe to build per request."""

    def __init__(
        self,
        store: UserStore,
        config: AuthConfig,
        hasher: CredentialHasher | None = None,
    ) -> None:
        if hasher is None:
            hasher = config.build_hasher()
        elif not config.matches(hasher):
            raise CredentialConfigError("hasher parameters differ from AuthConfig")
        self._store = store
        self._config = config
        self._hasher = hasher

    def _check_policy(self, password: str) -> None:
        if len(password) < self._config.min_password_length:
            raise InvalidSecretError(
                f"Password must be at least {self._config.min_password_length} characters"
            )

    async def register(self, name: str, email: str, password: str) -> UserCredential:
        """Enroll a new user with a freshly salted credential.

        Raises:
            InvalidSecretError: password fails the length policy.
            EmailExistsError: email is already enrolled.
        """
        self._check_policy(password)
        if await self._store.find_by_email(email) is not None:
            raise EmailExistsError()

        hashed = await asyncio.to_thread(self._hasher.hash_password, password)
        return await self._store.add(name, email, hashed)

    async def authenticate(self, email: str, password: str) -> UserCredential:
        """Return the user whose stored credential matches ``password``.

        Unknown email, short password, malformed record and wrong password all
        raise the same InvalidCredentialsError after one key derivation, so
        neither the response nor its latency reveals which case occurred.
        A password that cannot be UTF-8 encoded raises InvalidSecretError on
        every path, whether or not the email is enrolled.
        """
        user = await self._store.find_by_email(email)

        if user is None or len(password) < self._config.min_password_length:
            await asyncio.to_thread(self._hasher.dummy_verify, password)
            logger.info("Invalid credentials for %s", email)
            raise InvalidCredentialsError()

        if not self._hasher.is_well_formed(user.password):
            logger.warning("Malformed stored credential for user %s", user.user_id)
            await asyncio.to_thread(self._hasher.dummy_verify, password)
            raise InvalidCredentialsError()

        matched = await asyncio.to_thread(
            self._hasher.verify_password, password, user.password
        )
        if not matched:
            logger.info("Invalid credentials for %s", email)
            raise InvalidCredentialsError()

        return user

    async def change_password(
        self,
        email: str,
        current_password: str,
        new_password: str,
    ) -> UserCredential:
        """Replace the stored credential after re-checking the current one.

        The new record always carries a new salt, even if ``new_password``
        equals the old one.
        """
        user = await self.authenticate(email, current_password)
        self._check_policy(new_password)

        hashed = await asyncio.to_thread(self._hasher.hash_password, new_password)
        await self._store.replace_password(user.user_id, hashed)
        logger.info("Password changed for user %s", user.user_id)
        return user
