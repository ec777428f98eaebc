"""
User ORM Model
SQLAlchemy model for persistence
"""
import uuid
from sqlalchemy import Column, String, Float, DateTime, JSON, Text, Uuid
from sqlalchemy.sql import func

from core.database import Base
from domain.enums import UserRole


class UserModel(Base):
    """User table ORM model"""

    __tablename__ = "users"

    # Primary Key
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)

    # Authentication
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default=UserRole.CANDIDATE.value)

    # Personal Information
    full_name = Column(String(255), nullable=False)

    # Matching profile
    cv_text = Column(Text, nullable=False, default="")
    skills = Column(JSON, nullable=False, default=list)
    experience_years = Column(Float, nullable=True)
    education_level = Column(String(50), nullable=True)
    location = Column(String(255), nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<UserModel {self.email}>"
