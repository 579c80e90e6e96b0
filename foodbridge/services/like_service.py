import enum
import logging
from datetime import datetime
from typing import Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from foodbridge.models.like import LikeCounter, UserLike

logger = logging.getLogger(__name__)

COUNTER_ID = 1


class LikeOutcome(str, enum.Enum):
    LIKED = "liked"
    ALREADY_LIKED = "already_liked"


class LikeService:
    """Site-wide like counter, one like per email"""

    def __init__(self, db: Session):
        self.db = db

    def total(self) -> int:
        return self.db.query(LikeCounter.total_likes).filter(LikeCounter.id == COUNTER_ID).scalar() or 0

    def has_liked(self, email: str) -> bool:
        return self.db.query(UserLike.id).filter(UserLike.email == email.strip().lower()).first() is not None

    def status(self, email: str) -> dict:
        return {"total_likes": self.total(), "user_has_liked": self.has_liked(email)}

    def like(self, email: str) -> Tuple[LikeOutcome, int]:
        """Record the email's like and bump the counter in one transaction"""
        email = email.strip().lower()
        for attempt in range(2):
            self.db.add(UserLike(email=email, created_at=datetime.utcnow()))
            try:
                self.db.flush()
            except IntegrityError:
                self.db.rollback()
                return LikeOutcome.ALREADY_LIKED, self.total()

            updated = (
                self.db.query(LikeCounter)
                .filter(LikeCounter.id == COUNTER_ID)
                .update({LikeCounter.total_likes: LikeCounter.total_likes + 1}, synchronize_session=False)
            )
            if updated == 0:
                self.db.add(LikeCounter(id=COUNTER_ID, total_likes=1))
            try:
                self.db.commit()
                break
            except IntegrityError:
                # Another request created the counter row first, retry as an increment
                self.db.rollback()
                if attempt:
                    raise

        logger.info(f"Like recorded for {email}")
        return LikeOutcome.LIKED, self.total()
