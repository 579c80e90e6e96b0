from fastapi import APIRouter
from . import admin, analytics, auth, contact, donations, likes, ratings, registration

api_router = APIRouter()

api_router.include_router(registration.router, tags=["registration"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])
api_router.include_router(donations.router, prefix="/donations", tags=["donations"])
api_router.include_router(ratings.router, tags=["ratings"])
api_router.include_router(analytics.router, prefix="/analytics", tags=["analytics"])
api_router.include_router(contact.router, tags=["contact"])
api_router.include_router(likes.router, tags=["likes"])
