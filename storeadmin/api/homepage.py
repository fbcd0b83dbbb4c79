"""Homepage API endpoints.

Reads and updates the storefront homepage copy.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from storeadmin.api.schemas import HomepageRequest, HomepageResponse
from storeadmin.catalog.service import HomepageService
from storeadmin.infrastructure.database import get_session

router = APIRouter(prefix="/homepage", tags=["Homepage"])


def get_service(session: Annotated[AsyncSession, Depends(get_session)]) -> HomepageService:
    """Get homepage service bound to the request session."""
    return HomepageService(session)


@router.get("", response_model=HomepageResponse, summary="Get homepage copy")
async def get_homepage(
    service: Annotated[HomepageService, Depends(get_service)],
) -> HomepageResponse:
    """Get homepage copy, falling back to default text when never saved."""
    return HomepageResponse.model_validate(await service.get_homepage())


@router.put("", response_model=HomepageResponse, summary="Update homepage copy")
async def update_homepage(
    body: HomepageRequest,
    service: Annotated[HomepageService, Depends(get_service)],
) -> HomepageResponse:
    """Create or overwrite homepage copy."""
    homepage = await service.update_homepage(body.title, body.description)
    return HomepageResponse.model_validate(homepage)
