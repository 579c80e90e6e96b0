from fastapi import APIRouter, Depends
from pydantic import EmailStr
from sqlalchemy.orm import Session

from foodbridge.core.database import get_db
from foodbridge.core.errors import Conflict
from foodbridge.schemas.like import LikeRequest, LikeResult, LikeStatus
from foodbridge.services.like_service import LikeOutcome, LikeService

router = APIRouter()


@router.get("/likes", response_model=LikeStatus)
def like_status(email: EmailStr, db: Session = Depends(get_db)):
    """Total likes and whether this email has already liked"""
    return LikeService(db).status(email)


@router.post("/likes", response_model=LikeResult)
def add_like(request: LikeRequest, db: Session = Depends(get_db)):
    outcome, total = LikeService(db).like(request.email)
    if outcome == LikeOutcome.ALREADY_LIKED:
        raise Conflict("User already liked")
    return {"message": "Liked successfully", "total_likes": total}
