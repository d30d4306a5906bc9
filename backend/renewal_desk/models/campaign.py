"""Outreach records: per-policy renewal reminder log and broadcast campaigns."""
from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from renewal_desk.core.database import Base


class ReminderLog(Base):
    """One row per reminder dispatch attempt. Never updated."""
    __tablename__ = "reminder_logs"

    id = Column(Integer, primary_key=True, index=True)
    policy_id = Column(Integer, ForeignKey("policies.id"), nullable=True, index=True)

    sent_at = Column(DateTime, server_default=func.now())
    status = Column(String, nullable=True)  # sent, mock_sent, failed
    days_remaining = Column(Integer, nullable=True)  # lead-time offset that fired
    message_type = Column(String, default="reminder", server_default="reminder")

    policy = relationship("Policy")


class Campaign(Base):
    """Summary of a production broadcast, written once after the last send."""
    __tablename__ = "campaigns"

    id = Column(Integer, primary_key=True, index=True)

    name = Column(String, nullable=False)
    message = Column(Text, nullable=False)  # template as entered, before personalization
    sent_at = Column(DateTime, server_default=func.now())
    total_recipients = Column(Integer, nullable=True)
    status = Column(String, nullable=True)
