import enum
import logging
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from foodbridge.models.enums import CandidateStatus, UserType
from foodbridge.models.pending_registration import CandidateAccount
from foodbridge.models.roster import Donor, Receiver
from foodbridge.services.email_service import EmailService

logger = logging.getLogger(__name__)

ROSTER_MODELS = {
    UserType.DONOR: Donor,
    UserType.RECEIVER: Receiver,
}


class ApprovalOutcome(str, enum.Enum):
    APPROVED = "approved"
    NOT_FOUND = "not_found"
    INVALID_USER_TYPE = "invalid_user_type"
    ALREADY_ENROLLED = "already_enrolled"


class BlockOutcome(str, enum.Enum):
    BLOCKED = "blocked"
    NOT_FOUND = "not_found"


class ApprovalService:
    def __init__(self, db: Session, email_service: EmailService):
        self.db = db
        self.email_service = email_service

    def list_candidates(self, include_blocked: bool = False) -> List[CandidateAccount]:
        query = self.db.query(CandidateAccount)
        if not include_blocked:
            query = query.filter(CandidateAccount.status == CandidateStatus.ACTIVE)
        return query.all()

    def approve(self, candidate_id: int, user_type: str) -> ApprovalOutcome:
        """Move an active candidate into the donor or receiver roster"""
        try:
            target = UserType(user_type)
        except ValueError:
            return ApprovalOutcome.INVALID_USER_TYPE
        roster_model = ROSTER_MODELS[target]

        candidate = (
            self.db.query(CandidateAccount)
            .filter(CandidateAccount.id == candidate_id, CandidateAccount.status == CandidateStatus.ACTIVE)
            .with_for_update()
            .first()
        )
        if candidate is None:
            self.db.rollback()
            return ApprovalOutcome.NOT_FOUND

        email = candidate.email
        organization_name = candidate.organization_name
        self.db.add(roster_model(
            organization_name=candidate.organization_name,
            organization_type=candidate.organization_type,
            phone=candidate.phone,
            address=candidate.address,
            email=candidate.email,
            password_hash=candidate.password_hash,
            created_at=candidate.created_at,
        ))
        try:
            deleted = (
                self.db.query(CandidateAccount)
                .filter(CandidateAccount.id == candidate_id, CandidateAccount.status == CandidateStatus.ACTIVE)
                .delete(synchronize_session=False)
            )
            if deleted != 1:
                self.db.rollback()
                return ApprovalOutcome.NOT_FOUND
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.warning(f"Candidate {candidate_id} ({email}) already has a roster account")
            return ApprovalOutcome.ALREADY_ENROLLED

        logger.info(f"Candidate {candidate_id} approved as {target.value}: {email}")
        # Approval stands even if the notification cannot be delivered
        if self.email_service.send_approval_email(email, organization_name, target.value):
            logger.info(f"Approval email sent to {email}")
        else:
            logger.error(f"Error sending approval email to {email}")
        return ApprovalOutcome.APPROVED

    def block(self, candidate_id: int) -> BlockOutcome:
        """Mark a candidate as blocked. The row is kept so its email and phone stay reserved."""
        updated = (
            self.db.query(CandidateAccount)
            .filter(CandidateAccount.id == candidate_id, CandidateAccount.status == CandidateStatus.ACTIVE)
            .update({CandidateAccount.status: CandidateStatus.BLOCKED}, synchronize_session=False)
        )
        if updated != 1:
            self.db.rollback()
            return BlockOutcome.NOT_FOUND
        self.db.commit()
        logger.info(f"Candidate {candidate_id} blocked")
        return BlockOutcome.BLOCKED
