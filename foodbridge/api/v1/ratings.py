from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from foodbridge.api.deps import get_current_receiver
from foodbridge.core.database import get_db
from foodbridge.core.errors import Forbidden, NotFound
from foodbridge.schemas.rating import DonorProfile, RatingCreate
from foodbridge.schemas.registration import MessageResponse
from foodbridge.services.auth_service import Identity
from foodbridge.services.rating_service import RateOutcome, RatingService

router = APIRouter()


@router.post("/donations/{donation_id}/rating", response_model=MessageResponse)
def rate_donation(
    donation_id: int,
    payload: RatingCreate,
    identity: Identity = Depends(get_current_receiver),
    db: Session = Depends(get_db),
):
    outcome = RatingService(db).rate(donation_id, identity.email, payload.rating, payload.review)
    if outcome == RateOutcome.NO_SUCH_RECEIVER:
        raise NotFound("Receiver not found")
    if outcome == RateOutcome.NO_SUCH_DONATION:
        raise NotFound("Donation not found")
    if outcome == RateOutcome.FORBIDDEN:
        raise Forbidden("Not authorized to rate this donation")
    return {"message": "Rating submitted successfully"}


@router.get("/donors/{donor_id}/profile", response_model=DonorProfile)
def donor_profile(donor_id: int, db: Session = Depends(get_db)):
    """Public donor details with the ratings receivers left"""
    profile = RatingService(db).donor_profile(donor_id)
    if profile is None:
        raise NotFound("Donor not found")
    return profile
