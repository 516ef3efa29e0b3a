"""SQLAlchemy tables mirroring the domain entities.

Column names match the dataclass field names in ``localfix.domain.entities``
so rows convert to entities field by field.
"""
from __future__ import annotations

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    JSON,
    func,
)

from .session import Base


class UserRow(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True)
    # Uniqueness of e-mails is not enforced at this layer.
    email = Column(String(255), index=True, nullable=False)
    password_hash = Column(Text, nullable=False)
    first_name = Column(String(120), nullable=False)
    last_name = Column(String(120), nullable=False)
    role = Column(String(32), default="customer", nullable=False)
    phone = Column(String(32), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class ServiceCategoryRow(Base):
    __tablename__ = "service_categories"

    id = Column(String(36), primary_key=True)
    name = Column(String(120), nullable=False)
    description = Column(Text, nullable=True)
    icon = Column(String(64), nullable=False)
    color = Column(String(32), nullable=False)


class ProviderRow(Base):
    __tablename__ = "providers"

    id = Column(String(36), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    specialty = Column(String(255), nullable=False)
    location = Column(String(255), default="", nullable=False)
    business_name = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    hourly_rate = Column(String(32), nullable=True)
    is_approved = Column(Boolean, default=False, nullable=False)
    is_available = Column(Boolean, default=True, nullable=False)
    service_radius = Column(Integer, nullable=True)
    rating = Column(String(32), default="0", nullable=False)
    review_count = Column(Integer, default=0, nullable=False)
    categories = Column(JSON, default=list, nullable=False)
    portfolio = Column(JSON, default=list, nullable=False)
    certifications = Column(JSON, default=list, nullable=False)
    years_experience = Column(Integer, nullable=True)
    profile_image = Column(Text, nullable=True)
    availability = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class ProviderCategoryRow(Base):
    __tablename__ = "provider_categories"

    id = Column(String(36), primary_key=True)
    provider_id = Column(String(36), ForeignKey("providers.id", ondelete="CASCADE"), index=True, nullable=False)
    category_id = Column(String(36), ForeignKey("service_categories.id", ondelete="CASCADE"), nullable=False)


class BookingRow(Base):
    __tablename__ = "bookings"

    id = Column(String(36), primary_key=True)
    customer_id = Column(String(36), ForeignKey("users.id"), index=True, nullable=False)
    provider_id = Column(String(36), ForeignKey("providers.id"), index=True, nullable=False)
    status = Column(String(32), default="pending", nullable=False)
    estimated_duration = Column(Integer, nullable=True)
    estimated_cost = Column(String(32), nullable=True)
    actual_cost = Column(String(32), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class ReviewRow(Base):
    __tablename__ = "reviews"

    id = Column(String(36), primary_key=True)
    provider_id = Column(String(36), ForeignKey("providers.id"), index=True, nullable=False)
    customer_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    booking_id = Column(String(36), ForeignKey("bookings.id"), nullable=False)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=True)
    is_visible = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
