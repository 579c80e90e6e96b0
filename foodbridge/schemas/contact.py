from pydantic import BaseModel, ConfigDict, EmailStr, Field
from datetime import datetime


class ContactRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    message: str = Field(..., min_length=1)


class FeedbackRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    feedback: str = Field(..., min_length=1)


class FeedbackResponse(BaseModel):
    id: int
    name: str
    feedback: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
