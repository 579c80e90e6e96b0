from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from foodbridge.api.deps import get_email_service
from foodbridge.core.database import get_db
from foodbridge.core.errors import Conflict, NotFound, ValidationFailed
from foodbridge.schemas.registration import MessageResponse, OtpResendRequest, OtpVerifyRequest, RegistrationRequest
from foodbridge.services.email_service import EmailService
from foodbridge.services.registration_service import (
    ConfirmOutcome, RegistrationService, ResendOutcome, SubmitOutcome,
)

router = APIRouter()


@router.post("/register", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def register(
    request: RegistrationRequest,
    db: Session = Depends(get_db),
    email_service: EmailService = Depends(get_email_service),
):
    """Start registration: store the pending registration and email an OTP"""
    outcome = RegistrationService(db, email_service).submit(request)
    if outcome == SubmitOutcome.VALIDATION_ERROR:
        raise ValidationFailed("All fields are required and user/organization types must be valid!")
    if outcome == SubmitOutcome.DUPLICATE_EMAIL:
        raise Conflict("Email already registered or pending verification!")
    if outcome == SubmitOutcome.DUPLICATE_PHONE:
        raise Conflict("Phone number already registered or pending verification!")
    return {"message": "OTP sent. Please verify to complete registration.", "email": request.email.lower()}


@router.post("/verify-otp", response_model=MessageResponse)
def verify_otp(
    request: OtpVerifyRequest,
    db: Session = Depends(get_db),
    email_service: EmailService = Depends(get_email_service),
):
    outcome = RegistrationService(db, email_service).confirm(request.email, request.otp)
    if outcome == ConfirmOutcome.NO_SUCH_PENDING:
        raise NotFound("No pending registration for this email!")
    if outcome == ConfirmOutcome.INVALID_OTP:
        raise ValidationFailed("Invalid OTP!")
    if outcome == ConfirmOutcome.EXPIRED_OTP:
        raise ValidationFailed("OTP has expired, please request a new one!")
    if outcome == ConfirmOutcome.DUPLICATE_ACCOUNT:
        raise Conflict("Email or phone number already registered!")
    return {"message": "OTP Verified. Registration Complete! Your account is awaiting approval."}


@router.post("/resend-otp", response_model=MessageResponse)
def resend_otp(
    request: OtpResendRequest,
    db: Session = Depends(get_db),
    email_service: EmailService = Depends(get_email_service),
):
    outcome = RegistrationService(db, email_service).resend_otp(request.email)
    if outcome == ResendOutcome.NO_SUCH_PENDING:
        raise NotFound("No pending registration for this email!")
    return {"message": "A new OTP has been sent."}
