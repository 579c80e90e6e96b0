# models/roster.py
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Text
from sqlalchemy.orm import relationship
from foodbridge.core.database import Base


class Donor(Base):
    __tablename__ = "donor"

    id = Column(Integer, primary_key=True, index=True)
    organization_name = Column(String(255), nullable=False)
    organization_type = Column(String(50), nullable=False)
    phone = Column(String(20), nullable=False)
    address = Column(Text, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    donations = relationship("Donation", back_populates="donor")

    def __repr__(self):
        return f"<Donor(id={self.id}, email='{self.email}')>"


class Receiver(Base):
    __tablename__ = "receivers"

    id = Column(Integer, primary_key=True, index=True)
    organization_name = Column(String(255), nullable=False)
    organization_type = Column(String(50), nullable=False)
    phone = Column(String(20), nullable=False)
    address = Column(Text, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    accepted_donations = relationship("Donation", back_populates="receiver")

    def __repr__(self):
        return f"<Receiver(id={self.id}, email='{self.email}')>"
