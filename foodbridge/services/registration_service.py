# services/registration_service.py
import enum
import logging
from datetime import datetime, timedelta

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from foodbridge.core.config import settings
from foodbridge.core.errors import DependencyFailure
from foodbridge.core.security import get_password_hash
from foodbridge.models.enums import OrganizationType, UserType
from foodbridge.models.pending_registration import CandidateAccount, PendingRegistration
from foodbridge.models.roster import Donor, Receiver
from foodbridge.schemas.registration import RegistrationRequest
from foodbridge.services.email_service import EmailService
from foodbridge.services.otp_service import OtpOutcome, OtpVerifier

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("user_type", "organization_name", "organization_type", "phone", "address", "email", "password")


class SubmitOutcome(str, enum.Enum):
    CREATED = "created"
    DUPLICATE_EMAIL = "duplicate_email"
    DUPLICATE_PHONE = "duplicate_phone"
    VALIDATION_ERROR = "validation_error"


class ConfirmOutcome(str, enum.Enum):
    COMPLETED = "completed"
    INVALID_OTP = "invalid_otp"
    EXPIRED_OTP = "expired_otp"
    NO_SUCH_PENDING = "no_such_pending"
    DUPLICATE_ACCOUNT = "duplicate_account"


class ResendOutcome(str, enum.Enum):
    SENT = "sent"
    NO_SUCH_PENDING = "no_such_pending"


class RegistrationService:
    """Pending registration -> OTP confirmation -> candidate account"""

    def __init__(self, db: Session, email_service: EmailService, otp_ttl_minutes: int = None,
                 otp_delivery_required: bool = None):
        self.db = db
        self.email_service = email_service
        self.otp_ttl_minutes = otp_ttl_minutes if otp_ttl_minutes is not None else settings.otp_ttl_minutes
        self.otp_delivery_required = (
            otp_delivery_required if otp_delivery_required is not None else settings.otp_delivery_required
        )
        self.otp = OtpVerifier(db, ttl_minutes=self.otp_ttl_minutes)

    def email_in_use(self, email: str) -> bool:
        """Email is taken by a pending registration, a candidate or an approved account"""
        for model in (PendingRegistration, CandidateAccount, Donor, Receiver):
            if self.db.query(model.id).filter(model.email == email).first():
                return True
        return False

    def phone_in_use(self, phone: str) -> bool:
        for model in (PendingRegistration, CandidateAccount):
            if self.db.query(model.id).filter(model.phone == phone).first():
                return True
        return False

    @staticmethod
    def validate(request: RegistrationRequest) -> bool:
        if any(not str(getattr(request, field) or "").strip() for field in REQUIRED_FIELDS):
            return False
        if request.user_type not in {t.value for t in UserType}:
            return False
        return request.organization_type in {t.value for t in OrganizationType}

    def submit(self, request: RegistrationRequest) -> SubmitOutcome:
        """Store a pending registration and email its OTP"""
        if not self.validate(request):
            return SubmitOutcome.VALIDATION_ERROR

        email = request.email.strip().lower()
        if self.email_in_use(email):
            return SubmitOutcome.DUPLICATE_EMAIL
        if self.phone_in_use(request.phone):
            return SubmitOutcome.DUPLICATE_PHONE

        pending = PendingRegistration(
            email=email,
            user_type=UserType(request.user_type),
            organization_name=request.organization_name,
            organization_type=request.organization_type,
            phone=request.phone,
            address=request.address,
            password_hash=get_password_hash(request.password),
            created_at=datetime.utcnow(),
        )
        self.db.add(pending)
        try:
            self.db.flush()
            code = self.otp.issue(email)
            self.db.commit()
        except IntegrityError:
            # A concurrent submission with the same email or phone won the unique constraint
            self.db.rollback()
            logger.info(f"Concurrent registration rejected for {email}")
            if self.email_in_use(email):
                return SubmitOutcome.DUPLICATE_EMAIL
            return SubmitOutcome.DUPLICATE_PHONE

        logger.info(f"Pending registration created for {email}")
        if not self.email_service.send_otp_email(email, code, self.otp_ttl_minutes):
            logger.error(f"OTP delivery failed for {email}")
            if self.otp_delivery_required:
                self.discard_pending(email)
                raise DependencyFailure("Could not send the verification email. Please try again.", retryable=True)
        return SubmitOutcome.CREATED

    def discard_pending(self, email: str):
        self.db.query(PendingRegistration).filter(PendingRegistration.email == email).delete(synchronize_session=False)
        self.otp.purge(email)
        self.db.commit()

    def _pending_exists(self, email: str) -> bool:
        return self.db.query(PendingRegistration.id).filter(PendingRegistration.email == email).first() is not None

    def resend_otp(self, email: str) -> ResendOutcome:
        email = email.strip().lower()
        if not self._pending_exists(email):
            return ResendOutcome.NO_SUCH_PENDING
        code = self.otp.issue(email)
        self.db.commit()
        if not self.email_service.send_otp_email(email, code, self.otp_ttl_minutes):
            logger.error(f"OTP re-delivery failed for {email}")
        return ResendOutcome.SENT

    def confirm(self, email: str, code: str) -> ConfirmOutcome:
        """Promote the pending registration to a candidate account.

        Copy, delete and OTP cleanup commit together; concurrent confirmations
        for one email promote at most once.
        """
        email = email.strip().lower()
        pending = (
            self.db.query(PendingRegistration)
            .filter(PendingRegistration.email == email)
            .with_for_update()
            .first()
        )
        if pending is None:
            self.db.rollback()
            return ConfirmOutcome.NO_SUCH_PENDING

        outcome = self.otp.confirm(email, code)
        if outcome == OtpOutcome.INVALID:
            self.db.rollback()
            if not self._pending_exists(email):
                return ConfirmOutcome.NO_SUCH_PENDING
            return ConfirmOutcome.INVALID_OTP
        if outcome == OtpOutcome.EXPIRED:
            self.db.rollback()
            return ConfirmOutcome.EXPIRED_OTP

        candidate = CandidateAccount(
            user_type=pending.user_type,
            organization_name=pending.organization_name,
            organization_type=pending.organization_type,
            phone=pending.phone,
            address=pending.address,
            email=pending.email,
            password_hash=pending.password_hash,
            created_at=pending.created_at,
        )
        self.db.add(candidate)
        try:
            deleted = (
                self.db.query(PendingRegistration)
                .filter(PendingRegistration.id == pending.id)
                .delete(synchronize_session=False)
            )
            if deleted != 1:
                self.db.rollback()
                return ConfirmOutcome.NO_SUCH_PENDING
            self.otp.purge(email)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            if self._pending_exists(email):
                logger.warning(f"Registration for {email} collides with an existing candidate")
                return ConfirmOutcome.DUPLICATE_ACCOUNT
            logger.info(f"Registration for {email} was already promoted")
            return ConfirmOutcome.NO_SUCH_PENDING

        logger.info(f"Registration confirmed for {email}, awaiting approval")
        return ConfirmOutcome.COMPLETED

    def cleanup_expired(self, ttl_hours: int = None) -> int:
        """Drop abandoned pending registrations and their stale OTP challenges"""
        ttl_hours = ttl_hours if ttl_hours is not None else settings.pending_registration_ttl_hours
        cutoff = datetime.utcnow() - timedelta(hours=ttl_hours)
        removed = (
            self.db.query(PendingRegistration)
            .filter(PendingRegistration.created_at < cutoff)
            .delete(synchronize_session=False)
        )
        self.otp.purge_expired(cutoff)
        self.db.commit()
        if removed:
            logger.info(f"Removed {removed} expired pending registrations")
        return removed
