"""
Match Model (Persistence)
One row per (job, candidate) pair.
"""
import uuid
from sqlalchemy import (
    Column,
    String,
    Float,
    Boolean,
    DateTime,
    ForeignKey,
    JSON,
    Text,
    Uuid,
    UniqueConstraint,
    CheckConstraint,
    Index,
)
from sqlalchemy.sql import func

from core.database import Base
from domain.enums import MatchStatus


class MatchModel(Base):
    __tablename__ = "matches"
    __table_args__ = (
        UniqueConstraint("job_id", "candidate_id", name="uq_matches_job_candidate"),
        CheckConstraint("score >= 0 AND score <= 100", name="ck_matches_score_range"),
        Index("ix_matches_status_expires_at", "status", "expires_at"),
    )

    # Primary Key
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)

    # Parties (immutable after creation)
    job_id = Column(Uuid(as_uuid=True), ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    candidate_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    employer_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # Scoring
    score = Column(Float, nullable=False, default=0.0)
    match_factors = Column(JSON, nullable=True)

    # Lifecycle
    type = Column(String(50), nullable=False)
    message = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default=MatchStatus.PENDING.value, index=True)
    viewed_by_employer = Column(Boolean, nullable=False, default=False)
    viewed_by_candidate = Column(Boolean, nullable=False, default=False)
    expires_at = Column(DateTime(timezone=True), nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<MatchModel Job:{self.job_id} Candidate:{self.candidate_id} {self.status}>"
