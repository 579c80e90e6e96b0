from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime
from foodbridge.core.database import Base


class OtpChallenge(Base):
    __tablename__ = "otp_verification"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), index=True, nullable=False)
    code = Column(String(6), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<OtpChallenge(id={self.id}, email='{self.email}', created_at={self.created_at})>"
