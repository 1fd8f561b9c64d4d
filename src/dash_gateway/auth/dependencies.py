"""FastAPI dependencies for the auth endpoints.

Usage in a router:
    from src.dash_gateway.auth.dependencies import get_auth_service

    @router.post("/login")
    async def login(service: AuthService = Depends(get_auth_service)):
        ...
"""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.dash_common.database import get_db_session
from src.dash_gateway.auth.config import AuthConfig
from src.dash_gateway.auth.password import CredentialHasher
from src.dash_gateway.user.service import AuthService
from src.dash_gateway.user.store import SqlAlchemyUserStore


@lru_cache(maxsize=1)
def get_auth_config() -> AuthConfig:
    return AuthConfig.from_settings(settings)


@lru_cache(maxsize=1)
def get_hasher() -> CredentialHasher:
    """Validated once; CredentialConfigError here aborts startup."""
    return get_auth_config().build_hasher()


async def get_auth_service(
    db: AsyncSession = Depends(get_db_session),
) -> AuthService:
    return AuthService(SqlAlchemyUserStore(db), get_auth_config(), get_hasher())
