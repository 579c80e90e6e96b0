import enum
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from foodbridge.models.donation import Donation
from foodbridge.models.rating import Rating
from foodbridge.models.roster import Donor, Receiver

logger = logging.getLogger(__name__)


class RateOutcome(str, enum.Enum):
    RATED = "rated"
    NO_SUCH_RECEIVER = "no_such_receiver"
    NO_SUCH_DONATION = "no_such_donation"
    FORBIDDEN = "forbidden"


class RatingService:
    def __init__(self, db: Session):
        self.db = db

    def rate(self, donation_id: int, receiver_email: str, rating: int, review: Optional[str] = None) -> RateOutcome:
        """Insert or overwrite the receiver's rating for a donation it accepted"""
        receiver = self.db.query(Receiver).filter(Receiver.email == receiver_email.strip().lower()).first()
        if receiver is None:
            return RateOutcome.NO_SUCH_RECEIVER

        donation = self.db.query(Donation).filter(Donation.id == donation_id).first()
        if donation is None:
            return RateOutcome.NO_SUCH_DONATION
        if donation.accepted_by != receiver.id:
            return RateOutcome.FORBIDDEN

        for attempt in range(2):
            existing = (
                self.db.query(Rating)
                .filter(Rating.donation_id == donation_id, Rating.receiver_id == receiver.id)
                .with_for_update()
                .first()
            )
            if existing:
                existing.rating = rating
                existing.review = review
                existing.created_at = datetime.utcnow()
            else:
                self.db.add(Rating(
                    donation_id=donation_id,
                    receiver_id=receiver.id,
                    donor_id=donation.donor_id,
                    rating=rating,
                    review=review,
                    created_at=datetime.utcnow(),
                ))
            try:
                self.db.commit()
                break
            except IntegrityError:
                # Lost an insert race with the same receiver, retry as an update
                self.db.rollback()
                if attempt:
                    raise

        logger.info(f"Receiver {receiver.id} rated donation {donation_id}: {rating}")
        return RateOutcome.RATED

    def donor_profile(self, donor_id: int) -> Optional[dict]:
        donor = self.db.query(Donor).filter(Donor.id == donor_id).first()
        if donor is None:
            return None

        ratings = (
            self.db.query(Rating)
            .options(joinedload(Rating.receiver))
            .filter(Rating.donor_id == donor_id)
            .order_by(Rating.created_at.desc(), Rating.id.desc())
            .all()
        )
        average = self.db.query(func.avg(Rating.rating)).filter(Rating.donor_id == donor_id).scalar()
        return {
            "id": donor.id,
            "organization_name": donor.organization_name,
            "email": donor.email,
            "phone": donor.phone,
            "address": donor.address,
            "average_rating": round(float(average), 2) if average is not None else None,
            "ratings": [
                {
                    "rating": r.rating,
                    "review": r.review,
                    "created_at": r.created_at,
                    "receiver_name": r.receiver.organization_name,
                }
                for r in ratings
            ],
        }
