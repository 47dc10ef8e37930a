"""Owner login route."""

import logging

from fastapi import APIRouter, HTTPException, status

from .models import AdminLogin, MessageResponse
from .utils import is_admin_password

logger = logging.getLogger(__name__)

# mount api router
admin_router = APIRouter()


@admin_router.post("/login", response_model=MessageResponse)
async def admin_login(credentials: AdminLogin) -> MessageResponse:
    """
    Check the owner password.

    The client keeps the flag locally and sends the password back in the
    X-Admin-Password header on owner-only routes.
    """

    if not is_admin_password(credentials.password):
        logger.warning("Rejected owner login attempt")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect password",
        )

    logger.info("Owner logged in")
    return MessageResponse(status=status.HTTP_200_OK, message="Welcome back, owner!")
