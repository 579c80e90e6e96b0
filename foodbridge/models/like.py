from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime
from foodbridge.core.database import Base


class LikeCounter(Base):
    """Site-wide like total, kept in a single row"""
    __tablename__ = "likes"

    id = Column(Integer, primary_key=True)
    total_likes = Column(Integer, default=0, nullable=False)


class UserLike(Base):
    __tablename__ = "user_likes"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<UserLike(id={self.id}, email='{self.email}')>"
