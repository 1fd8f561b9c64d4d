"""Development seed API. Answers 404 unless DEBUG is on."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.dash_admin.application.service import SeedService
from src.dash_common.database import get_db_session
from src.dash_common.errors import SeedDisabledError
from src.dash_common.response import ApiResponse, success_response
from src.dash_gateway.auth.dependencies import get_hasher

router = APIRouter(tags=["seed"])


def get_seed_service() -> SeedService:
    return SeedService(get_hasher())


@router.post("/seed", response_model=ApiResponse)
async def seed(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
    service: SeedService = Depends(get_seed_service),
) -> ApiResponse:
    if not settings.DEBUG:
        raise SeedDisabledError()

    async with db.begin():
        inserted = await service.seed_users(db)

    return success_response(
        {"users": inserted},
        message="Database seeded successfully",
        request_id=getattr(request.state, "request_id", None),
    )
