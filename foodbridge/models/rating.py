from datetime import datetime
from sqlalchemy import Column, Integer, DateTime, ForeignKey, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from foodbridge.core.database import Base


class Rating(Base):
    __tablename__ = "ratings"

    id = Column(Integer, primary_key=True, index=True)
    donation_id = Column(Integer, ForeignKey("donations.id"), nullable=False, index=True)
    receiver_id = Column(Integer, ForeignKey("receivers.id"), nullable=False)
    donor_id = Column(Integer, ForeignKey("donor.id"), nullable=False, index=True)
    rating = Column(Integer, nullable=False)
    review = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # One rating per donation and receiver; later submissions overwrite it
    __table_args__ = (
        UniqueConstraint('donation_id', 'receiver_id', name='uq_rating_donation_receiver'),
    )

    receiver = relationship("Receiver")

    def __repr__(self):
        return f"<Rating(id={self.id}, donation_id={self.donation_id}, rating={self.rating})>"
