"""Seed service: enroll fixture users with freshly hashed passwords.

Rows that collide with an existing one (same id or same email) are left
untouched, so the endpoint is safe to call repeatedly and never resets an
existing credential.
"""

import asyncio
import logging
import uuid
from collections.abc import Sequence
from datetime import datetime, timezone

from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from src.dash_admin.application.fixtures import SEED_USERS
from src.dash_gateway.auth.password import CredentialHasher
from src.dash_gateway.user.db_models import UserModel

logger = logging.getLogger("dash.seed")


class SeedService:
    def __init__(
        self,
        hasher: CredentialHasher,
        users: Sequence[dict[str, str]] = SEED_USERS,
    ) -> None:
        self._hasher = hasher
        self._users = users

    async def seed_users(self, db: AsyncSession) -> int:
        """Insert fixture users, skipping any that conflict. Returns rows inserted.

        The caller must wrap this in ``async with db.begin()``.
        """
        inserted = 0
        for user in self._users:
            hashed = await asyncio.to_thread(self._hasher.hash_password, user["password"])
            now = datetime.now(timezone.utc)
            stmt = (
                insert(UserModel)
                .values(
                    id=uuid.UUID(user["id"]),
                    name=user["name"],
                    email=user["email"],
                    password=hashed,
                    created_at=now,
                    updated_at=now,
                )
                .on_conflict_do_nothing()
            )
            result = await db.execute(stmt)
            inserted += result.rowcount or 0

        logger.info("Seeded %d of %d users", inserted, len(self._users))
        return inserted
