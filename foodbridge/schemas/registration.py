from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime


class RegistrationRequest(BaseModel):
    user_type: str = Field(..., description="Donor or Receiver")
    organization_name: str
    organization_type: str = Field(..., description="Hotel, Restaurant, Mess, NGO, Individual, Company or Other")
    phone: str
    address: str
    email: EmailStr
    password: str = Field(..., max_length=100)

    @field_validator('user_type', 'organization_name', 'organization_type', 'phone', 'address', mode='after')
    def strip_text(cls, v):
        return v.strip()

    @field_validator('password', mode='after')
    def validate_password(cls, v):
        if len(v) < 8:
            raise ValueError('Password must be at least 8 characters long')
        if not any(c.isupper() for c in v):
            raise ValueError('Password must contain at least one uppercase letter')
        if not any(c.islower() for c in v):
            raise ValueError('Password must contain at least one lowercase letter')
        if not any(c.isdigit() for c in v):
            raise ValueError('Password must contain at least one digit')
        return v


class OtpVerifyRequest(BaseModel):
    email: EmailStr
    otp: str = Field(..., pattern=r"^\d{6}$", description="6-digit code from the registration email")


class OtpResendRequest(BaseModel):
    email: EmailStr


class CandidateResponse(BaseModel):
    id: int
    user_type: str
    organization_name: str
    organization_type: str
    phone: str
    address: str
    email: str
    status: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ApproveRequest(BaseModel):
    userType: str = Field(..., description="Donor or Receiver")


class MessageResponse(BaseModel):
    message: str
    email: Optional[str] = None
