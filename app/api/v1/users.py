"""
Users API endpoints
"""

from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import JSONResponse

from app.api.dependencies import get_services
from app.api.dispatch import dispatch, save_upload
from app.controllers import users as user_controllers
from app.core.auth import get_current_identity
from app.core.handlers import HandlerRequest, Identity
from app.schemas.user import (
    AvatarResponse,
    ProfileResponse,
    ProfileUpdate,
    ThemeResponse,
    ThemeUpdate,
)
from app.services.container import Services

router = APIRouter(prefix="/users", tags=["users"])


@router.patch("/profile", response_model=ProfileResponse)
async def update_profile(
    user_data: ProfileUpdate,
    identity: Annotated[Identity, Depends(get_current_identity)],
    services: Annotated[Services, Depends(get_services)],
) -> JSONResponse:
    """
    Update the profile of the currently authenticated user.

    All fields are optional. Only provided fields will be updated; a new
    password is stored as a bcrypt hash and never returned.
    """
    request = HandlerRequest(
        user=identity,
        services=services,
        body=user_data.model_dump(exclude_unset=True, exclude_none=True),
    )
    return await dispatch(user_controllers.update_profile, request)


@router.patch("/theme", response_model=ThemeResponse)
async def update_theme(
    theme_data: ThemeUpdate,
    identity: Annotated[Identity, Depends(get_current_identity)],
    services: Annotated[Services, Depends(get_services)],
) -> JSONResponse:
    """
    Update the theme preference of the currently authenticated user.
    """
    request = HandlerRequest(user=identity, services=services, body=theme_data.model_dump())
    return await dispatch(user_controllers.update_theme, request)


@router.patch("/avatars", response_model=AvatarResponse)
async def update_avatar(
    identity: Annotated[Identity, Depends(get_current_identity)],
    services: Annotated[Services, Depends(get_services)],
    avatar: Annotated[UploadFile | None, File(description="Avatar image file")] = None,
) -> JSONResponse:
    """
    Upload an avatar for the currently authenticated user.

    The image is stored by the media service under the user's id, so a new
    upload replaces the previous avatar.
    """
    request = HandlerRequest(user=identity, services=services, file=await save_upload(avatar))
    return await dispatch(user_controllers.update_avatar, request)
