import enum
import logging
import secrets
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from foodbridge.models.otp_challenge import OtpChallenge

logger = logging.getLogger(__name__)


class OtpOutcome(str, enum.Enum):
    VALID = "valid"
    INVALID = "invalid"
    EXPIRED = "expired"


class OtpVerifier:
    """Issues and checks one-time registration codes.

    The verifier only flushes; the calling workflow owns the transaction.
    """

    def __init__(self, db: Session, ttl_minutes: int = 5):
        self.db = db
        self.ttl = timedelta(minutes=ttl_minutes)

    @staticmethod
    def generate_code() -> str:
        return f"{secrets.randbelow(1_000_000):06d}"

    def issue(self, email: str) -> str:
        """Persist a new challenge for email. Earlier codes are left in place."""
        code = self.generate_code()
        self.db.add(OtpChallenge(email=email, code=code, created_at=datetime.utcnow()))
        self.db.flush()
        return code

    def latest(self, email: str):
        return (
            self.db.query(OtpChallenge)
            .filter(OtpChallenge.email == email)
            .order_by(OtpChallenge.created_at.desc(), OtpChallenge.id.desc())
            .first()
        )

    def confirm(self, email: str, submitted_code: str) -> OtpOutcome:
        # Only the newest challenge counts, older unexpired codes are never honored
        challenge = self.latest(email)
        if challenge is None or not secrets.compare_digest(challenge.code.encode(), (submitted_code or "").encode()):
            return OtpOutcome.INVALID
        if datetime.utcnow() - challenge.created_at > self.ttl:
            return OtpOutcome.EXPIRED
        consumed = (
            self.db.query(OtpChallenge)
            .filter(OtpChallenge.id == challenge.id)
            .delete(synchronize_session=False)
        )
        if consumed != 1:
            # Another confirmation used this code first
            return OtpOutcome.INVALID
        return OtpOutcome.VALID

    def purge(self, email: str) -> int:
        return self.db.query(OtpChallenge).filter(OtpChallenge.email == email).delete(synchronize_session=False)

    def purge_expired(self, cutoff: datetime) -> int:
        removed = self.db.query(OtpChallenge).filter(OtpChallenge.created_at < cutoff).delete(synchronize_session=False)
        if removed:
            logger.info(f"Purged {removed} stale OTP challenges")
        return removed
