from pydantic import BaseModel, EmailStr


class LikeRequest(BaseModel):
    email: EmailStr


class LikeStatus(BaseModel):
    total_likes: int
    user_has_liked: bool


class LikeResult(BaseModel):
    message: str
    total_likes: int
