from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Date, Float, ForeignKey, Text
from sqlalchemy.orm import relationship
from foodbridge.core.database import Base
from foodbridge.models.enums import DonationStatus, QuantityUnit, enum_column_type


class Donation(Base):
    __tablename__ = "donations"

    id = Column(Integer, primary_key=True, index=True)
    donor_id = Column(Integer, ForeignKey("donor.id"), nullable=False, index=True)
    food_category = Column(String(100), nullable=True, index=True)
    food_name = Column(String(255), nullable=False)

    # Original text kept for display; amount and unit are what analytics read
    quantity = Column(String(100), nullable=False)
    quantity_amount = Column(Float, nullable=False)
    quantity_unit = Column(enum_column_type(QuantityUnit), nullable=False)

    expiry_date = Column(Date, nullable=True)
    preparation_date = Column(Date, nullable=True)
    storage_instructions = Column(Text, nullable=True)

    status = Column(enum_column_type(DonationStatus), default=DonationStatus.PENDING, nullable=False, index=True)
    accepted_by = Column(Integer, ForeignKey("receivers.id"), nullable=True, index=True)
    accepted_at = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    donor = relationship("Donor", back_populates="donations")
    receiver = relationship("Receiver", back_populates="accepted_donations")

    def __repr__(self):
        return f"<Donation(id={self.id}, donor_id={self.donor_id}, status='{self.status}')>"
