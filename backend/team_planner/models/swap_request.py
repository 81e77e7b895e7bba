from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Index, Uuid, text, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum
import uuid

from team_planner.core.database import Base


class SwapStatus(str, enum.Enum):
    PENDING = "pending"          # Waiting for the target user to respond
    APPROVED = "approved"        # Target approved, schedules exchanged
    DENIED = "denied"            # Target denied
    CANCELLED = "cancelled"      # Requester withdrew the request


class SwapRequest(Base):
    __tablename__ = "swap_requests"
    __table_args__ = (
        # Only one pending request per (requester, target, date)
        Index(
            "uq_swap_requests_pending",
            "requester_id", "target_user_id", "requested_date",
            unique=True,
            postgresql_where=text("status = 'pending'"),
            sqlite_where=text("status = 'pending'"),
        ),
        Index("ix_swap_requests_status_created", "status", "created_at"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    requester_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    target_user_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    requested_date = Column(String(10), nullable=False)  # YYYY-MM-DD
    reason = Column(String(500), nullable=False, default="")
    status = Column(SQLEnum(SwapStatus, values_callable=lambda obj: [e.value for e in obj]), default=SwapStatus.PENDING, nullable=False)
    response_reason = Column(String(500), nullable=False, default="")
    version = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), server_default=func.now())
    responded_at = Column(DateTime(timezone=True), nullable=True)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    __mapper_args__ = {"version_id_col": version}

    # Relationships
    requester = relationship("User", foreign_keys=[requester_id])
    target_user = relationship("User", foreign_keys=[target_user_id])

    def __repr__(self):
        return f"<SwapRequest(id={self.id}, requester={self.requester_id}, target={self.target_user_id}, date={self.requested_date}, status={self.status})>"
