import secrets
import logging
from typing import Optional

from fastapi import Depends, Header
from fastapi.security import OAuth2PasswordBearer

from foodbridge.core.config import settings
from foodbridge.core.errors import Forbidden, Unauthorized
from foodbridge.core.security import decode_access_token
from foodbridge.services.auth_service import ROLE_DONOR, ROLE_RECEIVER, Identity
from foodbridge.services.email_service import EmailService

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login", auto_error=False)


def get_email_service() -> EmailService:
    """A dispatcher built from settings for each request; tests override this"""
    return EmailService.from_settings(settings)


def get_current_identity(token: Optional[str] = Depends(oauth2_scheme)) -> Identity:
    if not token:
        raise Unauthorized("Not authenticated")
    payload = decode_access_token(token)
    if payload is None:
        raise Unauthorized()
    return Identity(email=payload["sub"], role=payload.get("role", ""))


def get_current_donor(identity: Identity = Depends(get_current_identity)) -> Identity:
    if identity.role != ROLE_DONOR:
        logger.warning(f"Access denied for {identity.email}: donor role required")
        raise Forbidden("Access denied")
    return identity


def get_current_receiver(identity: Identity = Depends(get_current_identity)) -> Identity:
    if identity.role != ROLE_RECEIVER:
        logger.warning(f"Access denied for {identity.email}: receiver role required")
        raise Forbidden("Access denied")
    return identity


def require_admin(x_admin_key: Optional[str] = Header(None)):
    if not x_admin_key:
        raise Unauthorized("Admin key required")
    if not secrets.compare_digest(x_admin_key.encode(), settings.admin_api_key.encode()):
        raise Forbidden("Invalid admin key")
