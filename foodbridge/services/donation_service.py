import enum
import logging
from datetime import datetime
from typing import List, NamedTuple, Optional

from sqlalchemy.orm import Session, joinedload

from foodbridge.core.config import settings
from foodbridge.models.donation import Donation
from foodbridge.models.enums import DonationStatus
from foodbridge.models.roster import Donor, Receiver
from foodbridge.schemas.donation import DonationCreate
from foodbridge.services.auth_service import ROLE_DONOR, ROLE_RECEIVER, Identity
from foodbridge.utils.quantity import parse_quantity

logger = logging.getLogger(__name__)


class CreateOutcome(str, enum.Enum):
    CREATED = "created"
    NO_SUCH_DONOR = "no_such_donor"
    VALIDATION_ERROR = "validation_error"


class CreateResult(NamedTuple):
    outcome: CreateOutcome
    donation_id: Optional[int] = None
    error: Optional[str] = None


class AcceptOutcome(str, enum.Enum):
    ACCEPTED = "accepted"
    NO_SUCH_RECEIVER = "no_such_receiver"
    NO_SUCH_DONATION = "no_such_donation"
    ALREADY_ACCEPTED = "already_accepted"


class CompleteOutcome(str, enum.Enum):
    COMPLETED = "completed"
    NO_SUCH_DONATION = "no_such_donation"
    NOT_ACCEPTED = "not_accepted"
    ALREADY_COMPLETED = "already_completed"
    FORBIDDEN = "forbidden"


def _newest_first(query):
    # created_at descending, equal timestamps keep insertion order
    return query.order_by(Donation.created_at.desc(), Donation.id.asc())


def history_row(donation: Donation) -> dict:
    return {
        "donation_id": donation.id,
        "food_name": donation.food_name,
        "food_category": donation.food_category,
        "quantity": donation.quantity,
        "expiry_date": donation.expiry_date,
        "status": donation.status.value,
        "accepted_at": donation.accepted_at,
        "completed_at": donation.completed_at,
        "created_at": donation.created_at,
        "donor_name": donation.donor.organization_name,
        "receiver_name": donation.receiver.organization_name if donation.receiver else None,
    }


class DonationService:
    """Donation state machine: Pending -> Accepted -> Completed"""

    def __init__(self, db: Session, require_acceptance_before_completion: bool = None):
        self.db = db
        if require_acceptance_before_completion is None:
            require_acceptance_before_completion = settings.require_acceptance_before_completion
        self.require_acceptance_before_completion = require_acceptance_before_completion

    def create(self, donor_email: str, payload: DonationCreate) -> CreateResult:
        if not payload.food_name or not payload.quantity:
            return CreateResult(CreateOutcome.VALIDATION_ERROR, error="Food name and quantity are required!")
        try:
            quantity = parse_quantity(payload.quantity)
        except ValueError as e:
            return CreateResult(CreateOutcome.VALIDATION_ERROR, error=str(e))

        donor = self.db.query(Donor).filter(Donor.email == donor_email.strip().lower()).first()
        if donor is None:
            return CreateResult(CreateOutcome.NO_SUCH_DONOR, error="No donor found with this email.")

        donation = Donation(
            donor_id=donor.id,
            food_category=payload.food_category,
            food_name=payload.food_name,
            quantity=payload.quantity,
            quantity_amount=quantity.amount,
            quantity_unit=quantity.unit,
            expiry_date=payload.expiry_date,
            preparation_date=payload.preparation_date,
            storage_instructions=payload.storage_instructions,
            status=DonationStatus.PENDING,
            created_at=datetime.utcnow(),
        )
        self.db.add(donation)
        self.db.commit()
        self.db.refresh(donation)
        logger.info(f"Donation {donation.id} recorded for donor {donor.id} ({quantity})")
        return CreateResult(CreateOutcome.CREATED, donation_id=donation.id)

    def list_pending(self) -> List[dict]:
        rows = (
            _newest_first(
                self.db.query(Donation, Donor)
                .join(Donor, Donation.donor_id == Donor.id)
                .filter(Donation.status == DonationStatus.PENDING)
            ).all()
        )
        return [
            {
                "donation_id": donation.id,
                "food_category": donation.food_category,
                "food_name": donation.food_name,
                "quantity": donation.quantity,
                "expiry_date": donation.expiry_date,
                "preparation_date": donation.preparation_date,
                "storage_instructions": donation.storage_instructions,
                "created_at": donation.created_at,
                "organization_name": donor.organization_name,
                "phone": donor.phone,
                "address": donor.address,
                "email": donor.email,
                "status": donation.status.value,
            }
            for donation, donor in rows
        ]

    def list_accepted(self) -> List[dict]:
        donations = (
            _newest_first(
                self.db.query(Donation)
                .options(joinedload(Donation.donor), joinedload(Donation.receiver))
                .filter(Donation.status == DonationStatus.ACCEPTED)
            ).all()
        )
        return [history_row(d) for d in donations]

    def accept(self, donation_id: int, receiver_email: str) -> AcceptOutcome:
        """Claim a pending donation.

        The status check and the write are one conditional UPDATE, so of two
        concurrent claims exactly one sees an affected row.
        """
        receiver = self.db.query(Receiver).filter(Receiver.email == receiver_email.strip().lower()).first()
        if receiver is None:
            return AcceptOutcome.NO_SUCH_RECEIVER

        updated = (
            self.db.query(Donation)
            .filter(Donation.id == donation_id, Donation.status == DonationStatus.PENDING)
            .update(
                {
                    Donation.status: DonationStatus.ACCEPTED,
                    Donation.accepted_by: receiver.id,
                    Donation.accepted_at: datetime.utcnow(),
                },
                synchronize_session=False,
            )
        )
        if updated == 1:
            self.db.commit()
            logger.info(f"Donation {donation_id} accepted by receiver {receiver.id}")
            return AcceptOutcome.ACCEPTED

        self.db.rollback()
        if self.db.query(Donation.id).filter(Donation.id == donation_id).first() is None:
            return AcceptOutcome.NO_SUCH_DONATION
        return AcceptOutcome.ALREADY_ACCEPTED

    def _is_party(self, donation: Donation, actor: Identity) -> bool:
        if actor.role == ROLE_DONOR:
            return donation.donor is not None and donation.donor.email == actor.email
        if actor.role == ROLE_RECEIVER:
            return donation.receiver is not None and donation.receiver.email == actor.email
        return False

    def mark_completed(self, donation_id: int, actor: Optional[Identity] = None) -> CompleteOutcome:
        donation = self.db.query(Donation).filter(Donation.id == donation_id).first()
        if donation is None:
            return CompleteOutcome.NO_SUCH_DONATION
        if actor is not None and not self._is_party(donation, actor):
            return CompleteOutcome.FORBIDDEN

        if self.require_acceptance_before_completion:
            allowed = [DonationStatus.ACCEPTED]
        else:
            allowed = [DonationStatus.PENDING, DonationStatus.ACCEPTED]

        updated = (
            self.db.query(Donation)
            .filter(Donation.id == donation_id, Donation.status.in_(allowed))
            .update(
                {Donation.status: DonationStatus.COMPLETED, Donation.completed_at: datetime.utcnow()},
                synchronize_session=False,
            )
        )
        if updated == 1:
            self.db.commit()
            logger.info(f"Donation {donation_id} marked as completed")
            return CompleteOutcome.COMPLETED

        self.db.rollback()
        current = self.db.query(Donation.status).filter(Donation.id == donation_id).scalar()
        if current == DonationStatus.COMPLETED:
            if self.require_acceptance_before_completion:
                return CompleteOutcome.ALREADY_COMPLETED
            return CompleteOutcome.COMPLETED
        return CompleteOutcome.NOT_ACCEPTED

    def history_for_donor(self, email: str) -> List[dict]:
        donations = (
            _newest_first(
                self.db.query(Donation)
                .join(Donor, Donation.donor_id == Donor.id)
                .options(joinedload(Donation.donor), joinedload(Donation.receiver))
                .filter(Donor.email == email.strip().lower())
            ).all()
        )
        return [history_row(d) for d in donations]

    def history_for_receiver(self, email: str, include_completed: bool = False) -> List[dict]:
        statuses = [DonationStatus.ACCEPTED]
        if include_completed:
            statuses.append(DonationStatus.COMPLETED)
        donations = (
            _newest_first(
                self.db.query(Donation)
                .join(Receiver, Donation.accepted_by == Receiver.id)
                .options(joinedload(Donation.donor), joinedload(Donation.receiver))
                .filter(Receiver.email == email.strip().lower(), Donation.status.in_(statuses))
            ).all()
        )
        return [history_row(d) for d in donations]
