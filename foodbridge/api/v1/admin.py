from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from foodbridge.api.deps import get_email_service, require_admin
from foodbridge.core.database import get_db
from foodbridge.core.errors import Conflict, NotFound, ValidationFailed
from foodbridge.schemas.registration import ApproveRequest, CandidateResponse, MessageResponse
from foodbridge.services.approval_service import ApprovalOutcome, ApprovalService, BlockOutcome
from foodbridge.services.email_service import EmailService

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("/candidates", response_model=List[CandidateResponse])
def list_candidates(
    include_blocked: bool = False,
    db: Session = Depends(get_db),
    email_service: EmailService = Depends(get_email_service),
):
    return ApprovalService(db, email_service).list_candidates(include_blocked=include_blocked)


@router.post("/approve/{candidate_id}", response_model=MessageResponse)
def approve_candidate(
    candidate_id: int,
    request: ApproveRequest,
    db: Session = Depends(get_db),
    email_service: EmailService = Depends(get_email_service),
):
    """Move a verified candidate to the donor or receiver roster"""
    outcome = ApprovalService(db, email_service).approve(candidate_id, request.userType)
    if outcome == ApprovalOutcome.INVALID_USER_TYPE:
        raise ValidationFailed("User type must be Donor or Receiver")
    if outcome == ApprovalOutcome.NOT_FOUND:
        raise NotFound("User not found")
    if outcome == ApprovalOutcome.ALREADY_ENROLLED:
        raise Conflict("An account with this email already exists")
    return {"message": f"User approved as {request.userType} successfully."}


@router.post("/block/{candidate_id}", response_model=MessageResponse)
def block_candidate(
    candidate_id: int,
    db: Session = Depends(get_db),
    email_service: EmailService = Depends(get_email_service),
):
    outcome = ApprovalService(db, email_service).block(candidate_id)
    if outcome == BlockOutcome.NOT_FOUND:
        raise NotFound("User not found")
    return {"message": "User blocked successfully"}
