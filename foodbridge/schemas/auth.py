from pydantic import BaseModel, EmailStr, Field


class Token(BaseModel):
    access_token: str
    token_type: str
    role: str


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class AccountProfile(BaseModel):
    id: int
    role: str
    organization_name: str
    organization_type: str
    phone: str
    address: str
    email: str
