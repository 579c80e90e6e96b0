# api/auth.py
import logging
from datetime import timedelta
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from foodbridge.api.deps import get_current_identity
from foodbridge.core.config import settings
from foodbridge.core.database import get_db
from foodbridge.core.errors import NotFound, Unauthorized
from foodbridge.core.security import create_access_token
from foodbridge.schemas.auth import AccountProfile, LoginRequest, Token
from foodbridge.services.auth_service import AuthService, Identity

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=Token)
def login(login_data: LoginRequest, db: Session = Depends(get_db)):
    """Login for approved donors and receivers"""
    result = AuthService(db).authenticate(login_data.email, login_data.password)
    if not result:
        logger.info(f"Invalid login attempt for: {login_data.email}")
        raise Unauthorized("Invalid email or password")

    account, role = result
    access_token = create_access_token(
        subject=account.email,
        role=role,
        expires_delta=timedelta(minutes=settings.access_token_expire_minutes),
    )
    logger.info(f"{role.capitalize()} logged in: {account.email}")
    return {"access_token": access_token, "token_type": "bearer", "role": role}


@router.get("/me", response_model=AccountProfile)
def read_me(identity: Identity = Depends(get_current_identity), db: Session = Depends(get_db)):
    account = AuthService(db).get_account(identity)
    if account is None:
        raise NotFound("Account not found")
    return {
        "id": account.id,
        "role": identity.role,
        "organization_name": account.organization_name,
        "organization_type": account.organization_type,
        "phone": account.phone,
        "address": account.address,
        "email": account.email,
    }
