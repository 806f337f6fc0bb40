"""
SimHub Backend — User Preferences Route Handlers
================================================

    GET   /api/preferences?userId=...   read (defaults created on first read)
    PATCH /api/preferences              partial update, userId in the body
"""

from fastapi import APIRouter, Depends, Request

from simhub.dependencies import get_user_preferences_service
from simhub.routes.common import read_json_body
from simhub.schemas.common import ErrorResponse
from simhub.schemas.user_preferences import UserPreferencesOutput
from simhub.services.user_preferences_service import UserPreferencesService

router = APIRouter(prefix="/api/preferences", tags=["User Preferences"])


@router.get("", response_model=UserPreferencesOutput, summary="Get user preferences")
async def get_preferences(
    request: Request,
    service: UserPreferencesService = Depends(get_user_preferences_service),
) -> UserPreferencesOutput:
    return await service.get_preferences(request.query_params)


@router.patch(
    "",
    response_model=UserPreferencesOutput,
    responses={
        400: {"description": "Invalid input", "model": ErrorResponse},
        422: {"description": "Preference rule violated", "model": ErrorResponse},
    },
    summary="Update user preferences",
)
async def update_preferences(
    request: Request,
    service: UserPreferencesService = Depends(get_user_preferences_service),
) -> UserPreferencesOutput:
    return await service.update_preferences(await read_json_body(request))
