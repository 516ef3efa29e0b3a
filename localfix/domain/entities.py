"""
Entity model for the marketplace.

Every record type comes in two shapes: a ``New*`` input carrying the fields a
caller may supply (with their documented defaults) and the stored entity,
which is always fully materialized. ``Entity.build`` is the only place where
an input becomes an entity; both storage backends go through it.
"""
from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Optional, TypeVar

from localfix.core.errors import InvalidUpdateError

from .values import DecimalString, optional_decimal


class UserRole(str, Enum):
    CUSTOMER = "customer"
    PROVIDER = "provider"
    ADMIN = "admin"


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


def _enum_value(enum_cls: type[Enum], value: Any) -> str:
    return enum_cls(value).value


def _flag(name: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"{name} must be a boolean, got {value!r}")
    return value


def _whole_number(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"{name} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------
@dataclass
class NewUser:
    email: str
    password_hash: str
    first_name: str
    last_name: str
    role: str = UserRole.CUSTOMER.value
    phone: Optional[str] = None


@dataclass
class User:
    id: str
    email: str
    password_hash: str
    first_name: str
    last_name: str
    role: str
    phone: Optional[str]
    created_at: datetime

    def __post_init__(self) -> None:
        self.role = _enum_value(UserRole, self.role)

    @classmethod
    def build(cls, data: NewUser, *, entity_id: str, created_at: datetime) -> "User":
        return cls(
            id=entity_id,
            email=data.email,
            password_hash=data.password_hash,
            first_name=data.first_name,
            last_name=data.last_name,
            role=data.role if data.role is not None else UserRole.CUSTOMER.value,
            phone=data.phone,
            created_at=created_at,
        )


@dataclass(frozen=True)
class UserSummary:
    """Public subset of a user attached to provider listings."""

    id: str
    first_name: str
    last_name: str
    email: str

    @classmethod
    def of(cls, user: Optional[User]) -> Optional["UserSummary"]:
        if user is None:
            return None
        return cls(id=user.id, first_name=user.first_name, last_name=user.last_name, email=user.email)


# ---------------------------------------------------------------------------
# Service categories
# ---------------------------------------------------------------------------
@dataclass
class NewServiceCategory:
    name: str
    icon: str
    color: str
    description: Optional[str] = None


@dataclass
class ServiceCategory:
    id: str
    name: str
    description: Optional[str]
    icon: str
    color: str

    @classmethod
    def build(cls, data: NewServiceCategory, *, entity_id: str) -> "ServiceCategory":
        return cls(
            id=entity_id,
            name=data.name,
            description=data.description,
            icon=data.icon,
            color=data.color,
        )


# ---------------------------------------------------------------------------
# Providers
# ---------------------------------------------------------------------------
@dataclass
class NewProvider:
    """Provider creation input. Rating and review count are not accepted here;
    they start at ``"0"``/``0`` and change through ``update_provider``."""

    user_id: str
    specialty: str
    location: str = ""
    business_name: Optional[str] = None
    description: Optional[str] = None
    hourly_rate: Optional[str] = None
    is_approved: bool = False
    is_available: bool = True
    service_radius: Optional[int] = None
    categories: list[str] = field(default_factory=list)
    portfolio: list[Any] = field(default_factory=list)
    certifications: list[Any] = field(default_factory=list)
    years_experience: Optional[int] = None
    profile_image: Optional[str] = None
    availability: Optional[dict[str, Any]] = None


@dataclass
class Provider:
    id: str
    user_id: str
    specialty: str
    location: str
    business_name: Optional[str]
    description: Optional[str]
    hourly_rate: Optional[DecimalString]
    is_approved: bool
    is_available: bool
    service_radius: Optional[int]
    rating: DecimalString
    review_count: int
    categories: list[str]
    portfolio: list[Any]
    certifications: list[Any]
    years_experience: Optional[int]
    profile_image: Optional[str]
    availability: Optional[dict[str, Any]]
    created_at: datetime

    def __post_init__(self) -> None:
        self.rating = DecimalString(self.rating)
        self.hourly_rate = optional_decimal(self.hourly_rate)
        self.is_approved = _flag("is_approved", self.is_approved)
        self.is_available = _flag("is_available", self.is_available)
        self.review_count = _whole_number("review_count", self.review_count)
        if self.review_count < 0:
            raise ValueError("review_count must not be negative")

    @classmethod
    def build(cls, data: NewProvider, *, entity_id: str, created_at: datetime) -> "Provider":
        return cls(
            id=entity_id,
            user_id=data.user_id,
            specialty=data.specialty,
            location=data.location if data.location is not None else "",
            business_name=data.business_name,
            description=data.description,
            hourly_rate=data.hourly_rate,
            is_approved=False if data.is_approved is None else data.is_approved,
            is_available=True if data.is_available is None else data.is_available,
            service_radius=data.service_radius,
            rating=DecimalString("0"),
            review_count=0,
            categories=list(data.categories or []),
            portfolio=list(data.portfolio or []),
            certifications=list(data.certifications or []),
            years_experience=data.years_experience,
            profile_image=data.profile_image,
            availability=data.availability,
            created_at=created_at,
        )


@dataclass
class ProviderWithUser(Provider):
    """Provider as returned by listings, with its owner's summary joined in."""

    user: Optional[UserSummary] = None

    @classmethod
    def join(cls, provider: Provider, user: Optional[User]) -> "ProviderWithUser":
        values = {f.name: getattr(provider, f.name) for f in fields(Provider)}
        return cls(**values, user=UserSummary.of(user))


@dataclass
class NewProviderCategory:
    provider_id: str
    category_id: str


@dataclass
class ProviderCategory:
    id: str
    provider_id: str
    category_id: str

    @classmethod
    def build(cls, data: NewProviderCategory, *, entity_id: str) -> "ProviderCategory":
        return cls(id=entity_id, provider_id=data.provider_id, category_id=data.category_id)


# ---------------------------------------------------------------------------
# Bookings
# ---------------------------------------------------------------------------
@dataclass
class NewBooking:
    customer_id: str
    provider_id: str
    status: Optional[str] = None
    estimated_duration: Optional[int] = None
    estimated_cost: Optional[str] = None
    actual_cost: Optional[str] = None
    notes: Optional[str] = None


@dataclass
class Booking:
    id: str
    customer_id: str
    provider_id: str
    status: str
    estimated_duration: Optional[int]
    estimated_cost: Optional[DecimalString]
    actual_cost: Optional[DecimalString]
    notes: Optional[str]
    created_at: datetime

    def __post_init__(self) -> None:
        self.status = _enum_value(BookingStatus, self.status)
        self.estimated_cost = optional_decimal(self.estimated_cost)
        self.actual_cost = optional_decimal(self.actual_cost)

    @classmethod
    def build(cls, data: NewBooking, *, entity_id: str, created_at: datetime) -> "Booking":
        return cls(
            id=entity_id,
            customer_id=data.customer_id,
            provider_id=data.provider_id,
            status=data.status or BookingStatus.PENDING.value,
            estimated_duration=data.estimated_duration,
            estimated_cost=data.estimated_cost,
            actual_cost=data.actual_cost,
            notes=data.notes,
            created_at=created_at,
        )


# ---------------------------------------------------------------------------
# Reviews
# ---------------------------------------------------------------------------
@dataclass
class NewReview:
    provider_id: str
    customer_id: str
    booking_id: str
    rating: int
    comment: Optional[str] = None
    is_visible: bool = True


@dataclass
class Review:
    id: str
    provider_id: str
    customer_id: str
    booking_id: str
    rating: int
    comment: Optional[str]
    is_visible: bool
    created_at: datetime

    def __post_init__(self) -> None:
        self.rating = _whole_number("rating", self.rating)
        self.is_visible = _flag("is_visible", self.is_visible)

    @classmethod
    def build(cls, data: NewReview, *, entity_id: str, created_at: datetime) -> "Review":
        return cls(
            id=entity_id,
            provider_id=data.provider_id,
            customer_id=data.customer_id,
            booking_id=data.booking_id,
            rating=data.rating,
            comment=data.comment,
            is_visible=True if data.is_visible is None else data.is_visible,
            created_at=created_at,
        )


# ---------------------------------------------------------------------------
# Partial updates
# ---------------------------------------------------------------------------
E = TypeVar("E")


def merge(entity: E, updates: Mapping[str, Any]) -> E:
    """Return a copy of ``entity`` with ``updates`` applied field by field.

    Fields absent from ``updates`` keep their value. Unknown fields and
    attempts to change ``id`` raise InvalidUpdateError.
    """
    known = {f.name for f in fields(entity)}
    unknown = sorted(set(updates) - known)
    if unknown:
        raise InvalidUpdateError(
            f"Unknown field(s) for {type(entity).__name__}: {', '.join(unknown)}"
        )
    if "id" in updates and updates["id"] != getattr(entity, "id"):
        raise InvalidUpdateError(f"{type(entity).__name__}.id cannot be changed")
    return replace(entity, **updates)
