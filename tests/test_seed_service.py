"""Tests for the reference data seed routine."""
from __future__ import annotations

import pytest

from localfix.core.security import verify_password
from localfix.repositories import MemoryStorage
from localfix.services.seed_service import (
    ADMIN_EMAIL,
    SERVICE_CATEGORIES,
    seed_reference_data,
)


@pytest.mark.asyncio
async def test_seed_report_counts():
    report = await seed_reference_data(MemoryStorage())

    assert report.as_dict() == {"categories": 8, "users": 4, "providers": 3}


@pytest.mark.asyncio
async def test_categories_are_created_in_fixed_order():
    storage = MemoryStorage()
    await seed_reference_data(storage)

    categories = await storage.list_service_categories()

    assert [c.name for c in categories] == [c.name for c in SERVICE_CATEGORIES]
    assert categories[0].icon == "zap"
    assert categories[0].color == "blue"
    assert categories[-1].name == "Cleaning Services"


@pytest.mark.asyncio
async def test_admin_account_has_hashed_password():
    storage = MemoryStorage()
    await seed_reference_data(storage)

    admin = await storage.get_user_by_email(ADMIN_EMAIL)

    assert admin is not None
    assert admin.role == "admin"
    assert admin.password_hash != "admin123"
    assert verify_password("admin123", admin.password_hash)


@pytest.mark.asyncio
async def test_sample_providers_are_linked_and_rated():
    storage = MemoryStorage()
    await seed_reference_data(storage)
    categories = {c.name: c.id for c in await storage.list_service_categories()}

    mike_user = await storage.get_user_by_email("mike@example.com")
    mike = await storage.get_provider_by_user_id(mike_user.id)

    assert mike_user.role == "provider"
    assert verify_password("password123", mike_user.password_hash)
    assert mike.business_name == "Mike's Licensed Electrician"
    assert mike.location == "Downtown Area"
    assert mike.hourly_rate == "85.00"
    assert mike.is_approved is True
    assert mike.rating == "4.9"
    assert mike.review_count == 127
    assert mike.categories == [categories["Electrical"]]

    plumbers = await storage.list_providers(category_id=categories["Plumbing"])
    assert [p.user.email for p in plumbers] == ["sarah@example.com"]
    assert plumbers[0].rating == "4.8"

    carpenters = await storage.list_providers(category_id=categories["Carpentry"], location="west")
    assert [p.specialty for p in carpenters] == ["Master Carpenter"]
    assert await storage.list_providers(category_id=categories["HVAC"]) == []


@pytest.mark.asyncio
async def test_seeding_runs_through_sql_backend(sql_storage):
    await seed_reference_data(sql_storage)

    providers = await sql_storage.list_providers(is_approved=True)

    assert {p.user.first_name for p in providers} == {"Mike", "Sarah", "David"}
    assert sorted(p.rating for p in providers) == ["4.8", "4.9", "5.0"]
