from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from foodbridge.api.deps import get_current_donor, get_current_identity, get_current_receiver
from foodbridge.core.database import get_db
from foodbridge.core.errors import Conflict, Forbidden, NotFound, ValidationFailed
from foodbridge.schemas.donation import DonationCreate, DonationCreated, DonationHistoryItem, PendingDonation
from foodbridge.schemas.registration import MessageResponse
from foodbridge.services.auth_service import ROLE_DONOR, Identity
from foodbridge.services.donation_service import AcceptOutcome, CompleteOutcome, CreateOutcome, DonationService

router = APIRouter()


@router.post("", response_model=DonationCreated, status_code=status.HTTP_201_CREATED)
def create_donation(
    payload: DonationCreate,
    identity: Identity = Depends(get_current_donor),
    db: Session = Depends(get_db),
):
    result = DonationService(db).create(identity.email, payload)
    if result.outcome == CreateOutcome.VALIDATION_ERROR:
        raise ValidationFailed(result.error)
    if result.outcome == CreateOutcome.NO_SUCH_DONOR:
        raise NotFound(result.error)
    return {"message": "Food donation recorded successfully!", "donation_id": result.donation_id}


@router.get("", response_model=List[PendingDonation])
def list_pending_donations(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """Open donations, newest first, with the donor's contact details"""
    return DonationService(db).list_pending()


@router.get("/accepted", response_model=List[DonationHistoryItem])
def list_accepted_donations(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    return DonationService(db).list_accepted()


@router.get("/history", response_model=List[DonationHistoryItem])
def my_donation_history(
    include_completed: bool = False,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """Donors see what they published, receivers what they accepted"""
    service = DonationService(db)
    if identity.role == ROLE_DONOR:
        return service.history_for_donor(identity.email)
    return service.history_for_receiver(identity.email, include_completed=include_completed)


@router.get("/donor/history", response_model=List[DonationHistoryItem])
def donor_history(
    identity: Identity = Depends(get_current_donor),
    db: Session = Depends(get_db),
):
    return DonationService(db).history_for_donor(identity.email)


@router.get("/receiver/history", response_model=List[DonationHistoryItem])
def receiver_history(
    include_completed: bool = False,
    identity: Identity = Depends(get_current_receiver),
    db: Session = Depends(get_db),
):
    return DonationService(db).history_for_receiver(identity.email, include_completed=include_completed)


@router.post("/{donation_id}/accept", response_model=MessageResponse)
def accept_donation(
    donation_id: int,
    identity: Identity = Depends(get_current_receiver),
    db: Session = Depends(get_db),
):
    outcome = DonationService(db).accept(donation_id, identity.email)
    if outcome == AcceptOutcome.NO_SUCH_RECEIVER:
        raise NotFound("Receiver not found")
    if outcome == AcceptOutcome.NO_SUCH_DONATION:
        raise NotFound("Donation not found")
    if outcome == AcceptOutcome.ALREADY_ACCEPTED:
        raise Conflict("Donation is already Accepted.")
    return {"message": "Donation accepted successfully"}


@router.post("/{donation_id}/complete", response_model=MessageResponse)
def mark_donation_completed(
    donation_id: int,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    outcome = DonationService(db).mark_completed(donation_id, actor=identity)
    if outcome == CompleteOutcome.NO_SUCH_DONATION:
        raise NotFound("Donation not found.")
    if outcome == CompleteOutcome.FORBIDDEN:
        raise Forbidden("Only the donor or the accepting receiver can complete this donation")
    if outcome == CompleteOutcome.NOT_ACCEPTED:
        raise Conflict("Donation must be accepted before it can be completed.")
    if outcome == CompleteOutcome.ALREADY_COMPLETED:
        raise Conflict("Donation is already completed.")
    return {"message": "Donation marked as completed"}
