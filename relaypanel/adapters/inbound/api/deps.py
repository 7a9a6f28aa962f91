# relaypanel/adapters/inbound/api/deps.py

"""
Dependencies for injection into API endpoints.

This module defines functions that provide dependencies via
FastAPI Depends() for admin authentication and service access.
"""

import logging
import secrets
from typing import Optional

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from relaypanel.application.use_cases.panel_use_cases import PanelService
from relaypanel.core.container import ServiceContainer

# Configure logger
logger = logging.getLogger(__name__)

# Create bearer scheme for authentication
bearer_scheme = HTTPBearer(auto_error=False)


########################################################################
# Service Access
########################################################################

def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


def get_panel_service(container: ServiceContainer = Depends(get_container)) -> PanelService:
    return container.panel


########################################################################
# Admin Token Authentication
########################################################################

async def verify_admin_token(
        request: Request,
        credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme),
        container: ServiceContainer = Depends(get_container),
) -> None:
    """
    Verify the static admin bearer token.

    Args:
        request: Incoming request (used for logging)
        credentials: Authorization credentials with bearer token
        container: Service container holding the settings

    Raises:
        HTTPException: If the token is missing or does not match
    """
    expected = container.settings.ADMIN_API_TOKEN
    token = credentials.credentials if credentials else ""

    if not token or not secrets.compare_digest(token.encode("utf-8"), expected.encode("utf-8")):
        logger.warning(
            f"Rejected admin request: {request.method} {request.url.path} | "
            f"Client: {request.client.host if request.client else 'N/A'}"
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
