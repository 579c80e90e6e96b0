from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Text
from foodbridge.core.database import Base
from foodbridge.models.enums import UserType, CandidateStatus, enum_column_type


class PendingRegistration(Base):
    __tablename__ = "pending_registrations"
    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    user_type = Column(enum_column_type(UserType), nullable=False)
    organization_name = Column(String(255), nullable=False)
    organization_type = Column(String(50), nullable=False)
    phone = Column(String(20), unique=True, nullable=False)
    address = Column(Text, nullable=False)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<PendingRegistration(id={self.id}, email='{self.email}', user_type='{self.user_type}')>"


class CandidateAccount(Base):
    """Verified registration waiting for an administrator decision"""
    __tablename__ = "donor_registration"
    id = Column(Integer, primary_key=True, index=True)
    user_type = Column(enum_column_type(UserType), nullable=False)
    organization_name = Column(String(255), nullable=False)
    organization_type = Column(String(50), nullable=False)
    phone = Column(String(20), unique=True, nullable=False)
    address = Column(Text, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    status = Column(enum_column_type(CandidateStatus), default=CandidateStatus.ACTIVE, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<CandidateAccount(id={self.id}, email='{self.email}', status='{self.status}')>"
