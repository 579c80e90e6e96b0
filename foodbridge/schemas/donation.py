from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import date, datetime


class DonationCreate(BaseModel):
    food_category: Optional[str] = Field(None, max_length=100)
    food_name: str = Field(..., max_length=255)
    quantity: str = Field(..., max_length=100, description="Magnitude and unit, e.g. '10kg' or '5 plates'")
    expiry_date: Optional[date] = None
    preparation_date: Optional[date] = None
    storage_instructions: Optional[str] = None

    @field_validator('food_name', 'quantity', mode='after')
    def strip_text(cls, v):
        return v.strip()


class DonationCreated(BaseModel):
    message: str
    donation_id: int


class PendingDonation(BaseModel):
    donation_id: int
    food_category: Optional[str] = None
    food_name: str
    quantity: str
    expiry_date: Optional[date] = None
    preparation_date: Optional[date] = None
    storage_instructions: Optional[str] = None
    created_at: datetime
    organization_name: str
    phone: str
    address: str
    email: str
    status: str


class DonationHistoryItem(BaseModel):
    donation_id: int
    food_name: str
    food_category: Optional[str] = None
    quantity: str
    expiry_date: Optional[date] = None
    status: str
    accepted_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    created_at: datetime
    donor_name: str
    receiver_name: Optional[str] = None
