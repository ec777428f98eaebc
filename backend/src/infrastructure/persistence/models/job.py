"""
Job ORM Model
Job postings owned by employers
"""
import uuid
from sqlalchemy import Column, String, Float, Boolean, DateTime, ForeignKey, JSON, Text, Uuid
from sqlalchemy.sql import func

from core.database import Base


class JobModel(Base):
    __tablename__ = "jobs"

    # Primary Key
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)

    # Owner
    employer_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # Job Details
    title = Column(String(500), nullable=False)
    company = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    requirements = Column(JSON, nullable=False, default=list)
    location = Column(String(255), nullable=True)
    is_remote = Column(Boolean, nullable=False, default=False)
    min_experience_years = Column(Float, nullable=True)
    education_level = Column(String(50), nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<JobModel {self.title} @ {self.company}>"
