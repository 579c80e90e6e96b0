import logging
from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from foodbridge.api.deps import get_email_service
from foodbridge.core.database import get_db
from foodbridge.models.contact import ContactMessage, Feedback
from foodbridge.schemas.contact import ContactRequest, FeedbackRequest, FeedbackResponse
from foodbridge.schemas.registration import MessageResponse
from foodbridge.services.email_service import EmailService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/contact", response_model=MessageResponse)
def submit_contact(
    request: ContactRequest,
    db: Session = Depends(get_db),
    email_service: EmailService = Depends(get_email_service),
):
    db.add(ContactMessage(name=request.name, email=request.email, message=request.message))
    db.commit()
    if not email_service.send_contact_notification(request.name, request.email, request.message):
        logger.error(f"Contact notification for {request.email} was not delivered")
    return {"message": "Message sent successfully!"}


@router.post("/feedback", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def submit_feedback(request: FeedbackRequest, db: Session = Depends(get_db)):
    db.add(Feedback(name=request.name, feedback=request.feedback))
    db.commit()
    return {"message": "Feedback submitted successfully!"}


@router.get("/feedbacks", response_model=List[FeedbackResponse])
def list_feedbacks(limit: int = 100, db: Session = Depends(get_db)):
    return db.query(Feedback).order_by(Feedback.created_at.desc(), Feedback.id.desc()).limit(limit).all()
