from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class CategoryCount(BaseModel):
    food_category: Optional[str] = None
    donations_count: int


class QuantityPoint(BaseModel):
    date: str
    total_kg: float
    total_plates: float


class StatusPoint(BaseModel):
    date: str
    pending: int
    accepted: int
    completed: int


class TopDonor(BaseModel):
    organization_name: str
    total_kg: float
    total_plates: float
    total_donated: float


class StatisticsSummary(BaseModel):
    total: int
    pending: int
    accepted: int
    completed: int


class RecentDonation(BaseModel):
    food_name: str
    donor_name: str
    created_at: datetime


class ReportRow(BaseModel):
    food_name: str
    donor_name: str
    receiver_name: Optional[str] = None
    total_kg: float
    total_plates: float
