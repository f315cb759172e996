"""
Support email API endpoint
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.api.dependencies import get_services
from app.api.dispatch import dispatch
from app.controllers import email as email_controllers
from app.core.auth import get_current_identity
from app.core.handlers import HandlerRequest, Identity
from app.schemas.help import HelpRequest, MessageResponse
from app.services.container import Services

router = APIRouter(prefix="/help", tags=["help"])


@router.post("", response_model=MessageResponse)
async def send_help_email(
    help_data: HelpRequest,
    identity: Annotated[Identity, Depends(get_current_identity)],
    services: Annotated[Services, Depends(get_services)],
) -> JSONResponse:
    """
    Send a help request to the support team.

    The requester receives an acknowledgement at the given email address.
    """
    request = HandlerRequest(user=identity, services=services, body=help_data.model_dump())
    return await dispatch(email_controllers.send_help_email, request)
