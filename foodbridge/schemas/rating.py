from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime


class RatingCreate(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    review: Optional[str] = Field(None, max_length=2000)


class RatingEntry(BaseModel):
    rating: int
    review: Optional[str] = None
    created_at: datetime
    receiver_name: str


class DonorProfile(BaseModel):
    id: int
    organization_name: str
    email: str
    phone: str
    address: str
    average_rating: Optional[float] = None
    ratings: List[RatingEntry] = []
