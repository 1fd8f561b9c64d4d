"""User record store.

AuthService talks to storage only through the ``UserStore`` protocol. The
SQLAlchemy adapter below is the production implementation; tests use an
in-memory one.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Protocol

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.dash_common.errors import EmailExistsError, UserLookupError
from src.dash_gateway.user.db_models import UserModel

logger = logging.getLogger("dash.auth")


@dataclass(frozen=True)
class UserCredential:
    """A user's identity plus their serialized stored credential."""

    user_id: str
    name: str
    email: str
    password: str
    created_at: datetime | None = None


class UserStore(Protocol):
    async def find_by_email(self, email: str) -> UserCredential | None: ...

    async def add(self, name: str, email: str, password: str) -> UserCredential: ...

    async def replace_password(self, user_id: str, password: str) -> None: ...


def _to_credential(user: UserModel) -> UserCredential:
    return UserCredential(
        user_id=str(user.id),
        name=user.name,
        email=user.email,
        password=user.password,
        created_at=user.created_at,
    )


class SqlAlchemyUserStore:
    """UserStore over an AsyncSession. Transactions belong to the caller."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def find_by_email(self, email: str) -> UserCredential | None:
        try:
            result = await self._db.execute(
                select(UserModel).where(UserModel.email == email)
            )
        except SQLAlchemyError:
            logger.exception("Failed to fetch user")
            raise UserLookupError() from None
        user = result.scalar_one_or_none()
        return _to_credential(user) if user is not None else None

    async def add(self, name: str, email: str, password: str) -> UserCredential:
        now = datetime.now(timezone.utc)
        user = UserModel(
            id=uuid.uuid4(),
            name=name,
            email=email,
            password=password,
            created_at=now,
            updated_at=now,
        )
        self._db.add(user)
        try:
            await self._db.flush()
        except IntegrityError:
            # uq_users_email lost a race with a concurrent registration
            raise EmailExistsError() from None
        return _to_credential(user)

    async def replace_password(self, user_id: str, password: str) -> None:
        # Single UPDATE: the old salt:key pair is swapped out whole, never edited
        await self._db.execute(
            update(UserModel)
            .where(UserModel.id == uuid.UUID(user_id))
            .values(password=password)
        )
