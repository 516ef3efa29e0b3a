"""
Baseline reference data: service categories, the admin account and three
sample providers.

The routine only talks to the Storage contract, so both backends seed the
same records. Whether seeding should run at all is the backend's call.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Optional

from localfix.core.security import hash_password
from localfix.domain import NewProvider, NewServiceCategory, NewUser, ServiceCategory, UserRole

if TYPE_CHECKING:
    from localfix.repositories.base import Storage

SERVICE_CATEGORIES = (
    NewServiceCategory(name="Electrical", description="Wiring, repairs, installations", icon="zap", color="blue"),
    NewServiceCategory(name="Plumbing", description="Pipes, fixtures, emergency repairs", icon="wrench", color="green"),
    NewServiceCategory(name="Carpentry", description="Custom work, repairs, installations", icon="hammer", color="amber"),
    NewServiceCategory(name="HVAC", description="Heating, cooling, ventilation", icon="thermometer", color="purple"),
    NewServiceCategory(
        name="General Contracting", description="Home improvements, renovations", icon="building", color="red"
    ),
    NewServiceCategory(name="Landscaping", description="Garden design, lawn care", icon="leaf", color="teal"),
    NewServiceCategory(name="Painting", description="Interior, exterior, touch-ups", icon="paintbrush", color="orange"),
    NewServiceCategory(
        name="Cleaning Services", description="House cleaning, deep cleaning", icon="spray", color="gray"
    ),
)

ADMIN_EMAIL = "admin@localfix.com"
ADMIN_PASSWORD = "admin123"
SAMPLE_PROVIDER_PASSWORD = "password123"


@dataclass(frozen=True)
class SampleProvider:
    email: str
    first_name: str
    last_name: str
    specialty: str
    location: str
    description: str
    hourly_rate: str
    category_name: str
    rating: str
    review_count: int
    is_approved: bool = True


SAMPLE_PROVIDERS = (
    SampleProvider(
        email="mike@example.com",
        first_name="Mike",
        last_name="Thompson",
        specialty="Licensed Electrician",
        location="Downtown Area",
        description="15+ years experience in residential and commercial electrical work. "
        "Available for emergency calls.",
        hourly_rate="85.00",
        category_name="Electrical",
        rating="4.9",
        review_count=127,
    ),
    SampleProvider(
        email="sarah@example.com",
        first_name="Sarah",
        last_name="Martinez",
        specialty="Master Plumber",
        location="North Side",
        description="Specializing in emergency repairs, fixture installations, and water heater services. "
        "Fast response time.",
        hourly_rate="95.00",
        category_name="Plumbing",
        rating="4.8",
        review_count=93,
    ),
    SampleProvider(
        email="david@example.com",
        first_name="David",
        last_name="Chen",
        specialty="Master Carpenter",
        location="West End",
        description="Custom furniture, deck building, and general carpentry. Quality craftsmanship guaranteed.",
        hourly_rate="75.00",
        category_name="Carpentry",
        rating="5.0",
        review_count=45,
    ),
)


@dataclass
class SeedReport:
    categories: int = 0
    users: int = 0
    providers: int = 0

    def as_dict(self) -> dict:
        return asdict(self)


def _category_id(categories: list[ServiceCategory], name: str) -> Optional[str]:
    return next((c.id for c in categories if c.name == name), None)


async def seed_reference_data(storage: "Storage") -> SeedReport:
    """Insert categories, the admin account and the sample providers."""
    report = SeedReport()

    created: list[ServiceCategory] = []
    for category in SERVICE_CATEGORIES:
        created.append(await storage.create_service_category(category))
    report.categories = len(created)

    await storage.create_user(
        NewUser(
            email=ADMIN_EMAIL,
            password_hash=hash_password(ADMIN_PASSWORD),
            first_name="Admin",
            last_name="User",
            role=UserRole.ADMIN.value,
        )
    )
    report.users += 1

    for sample in SAMPLE_PROVIDERS:
        user = await storage.create_user(
            NewUser(
                email=sample.email,
                password_hash=hash_password(SAMPLE_PROVIDER_PASSWORD),
                first_name=sample.first_name,
                last_name=sample.last_name,
                role=UserRole.PROVIDER.value,
            )
        )
        report.users += 1
        category_id = _category_id(created, sample.category_name)
        provider = await storage.create_provider(
            NewProvider(
                user_id=user.id,
                business_name=f"{sample.first_name}'s {sample.specialty}",
                specialty=sample.specialty,
                location=sample.location,
                description=sample.description,
                hourly_rate=sample.hourly_rate,
                is_approved=sample.is_approved,
                categories=[category_id] if category_id else [],
            )
        )
        # Rating and review count are not part of NewProvider.
        await storage.update_provider(
            provider.id, {"rating": sample.rating, "review_count": sample.review_count}
        )
        report.providers += 1

    return report
