"""Onboarding submission model, one row per project request."""

from datetime import datetime
from typing import Optional

from sqlalchemy import JSON, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base, UUIDMixin, TimestampMixin


class Submission(Base, UUIDMixin, TimestampMixin):
    __tablename__ = "onboarding_submissions"

    # Basic information
    project_name: Mapped[str] = mapped_column(String(300), nullable=False)
    company_name: Mapped[Optional[str]] = mapped_column(String(300), nullable=True)
    industry: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Contact
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    preferred_contact: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    # Service
    service_type: Mapped[str] = mapped_column(String(20), nullable=False)  # landing_page|web_app|mobile_app
    budget: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    timeline: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    urgency: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    service_specific_data: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)

    # Additional requirements
    additional_requirements: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    inspiration: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    add_ons: Mapped[Optional[list]] = mapped_column(JSON, nullable=True)

    # Workflow
    status: Mapped[str] = mapped_column(String(20), default="pending")  # pending|in-progress|completed|rejected
    priority: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)  # low|medium|high|urgent
    assigned_to: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)

    # Notes
    internal_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    client_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    completed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
