from __future__ import annotations

from datetime import datetime, timezone

import pytest

from localfix.core.errors import InvalidUpdateError
from localfix.domain import (
    Booking,
    NewBooking,
    NewProvider,
    NewReview,
    NewUser,
    Provider,
    ProviderWithUser,
    Review,
    User,
    UserRole,
    merge,
)

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def _user(**overrides) -> User:
    values = dict(email="jane@example.com", password_hash="hash", first_name="Jane", last_name="Doe")
    values.update(overrides)
    return User.build(NewUser(**values), entity_id="u1", created_at=NOW)


def test_user_build_defaults_role_to_customer():
    user = _user()

    assert user.id == "u1"
    assert user.role == "customer"
    assert user.phone is None
    assert user.created_at == NOW


def test_user_role_accepts_enum_and_rejects_unknown():
    assert _user(role=UserRole.ADMIN).role == "admin"
    with pytest.raises(ValueError):
        _user(role="superuser")


def test_provider_build_fills_every_optional_field():
    provider = Provider.build(NewProvider(user_id="u1", specialty="Roofer"), entity_id="p1", created_at=NOW)

    assert provider.rating == "0"
    assert provider.review_count == 0
    assert provider.is_available is True
    assert provider.is_approved is False
    assert provider.location == ""
    assert provider.categories == []
    assert provider.portfolio == []
    assert provider.certifications == []
    for name in ("business_name", "description", "hourly_rate", "service_radius",
                 "years_experience", "profile_image", "availability"):
        assert getattr(provider, name) is None


def test_provider_build_does_not_share_input_lists():
    data = NewProvider(user_id="u1", specialty="Roofer", categories=["c1"])
    provider = Provider.build(data, entity_id="p1", created_at=NOW)

    data.categories.append("c2")

    assert provider.categories == ["c1"]


def test_provider_rejects_negative_review_count():
    provider = Provider.build(NewProvider(user_id="u1", specialty="Roofer"), entity_id="p1", created_at=NOW)

    with pytest.raises(ValueError):
        merge(provider, {"review_count": -1})


def test_booking_build_defaults_status_to_pending():
    booking = Booking.build(NewBooking(customer_id="u1", provider_id="p1"), entity_id="b1", created_at=NOW)

    assert booking.status == "pending"
    assert booking.estimated_cost is None
    with pytest.raises(ValueError):
        merge(booking, {"status": "lost"})


def test_review_build_defaults_to_visible():
    review = Review.build(
        NewReview(provider_id="p1", customer_id="u1", booking_id="b1", rating=5), entity_id="r1", created_at=NOW
    )

    assert review.is_visible is True
    assert review.comment is None


def test_merge_applies_only_given_fields():
    user = _user()

    merged = merge(user, {"first_name": "Janet"})

    assert merged.first_name == "Janet"
    assert merged.last_name == "Doe"
    assert user.first_name == "Jane"
    assert merge(user, {}) == user


def test_merge_rejects_unknown_fields_and_id_change():
    user = _user()

    with pytest.raises(InvalidUpdateError, match="nickname"):
        merge(user, {"nickname": "JJ"})
    with pytest.raises(InvalidUpdateError):
        merge(user, {"id": "u2"})
    assert merge(user, {"id": "u1"}) == user


def test_provider_with_user_join():
    user = _user()
    provider = Provider.build(NewProvider(user_id="u1", specialty="Roofer"), entity_id="p1", created_at=NOW)

    joined = ProviderWithUser.join(provider, user)
    orphan = ProviderWithUser.join(provider, None)

    assert joined.id == "p1"
    assert joined.user.email == "jane@example.com"
    assert joined.user.first_name == "Jane"
    assert orphan.user is None


def test_review_rating_is_coerced_to_integer():
    review = Review.build(
        NewReview(provider_id="p1", customer_id="u1", booking_id="b1", rating="4"), entity_id="r1", created_at=NOW
    )

    assert review.rating == 4
    with pytest.raises(ValueError):
        merge(review, {"rating": 4.5})
    with pytest.raises(ValueError):
        merge(review, {"rating": False})


@pytest.mark.parametrize("name", ["is_approved", "is_available"])
def test_provider_flags_reject_non_booleans(name):
    provider = Provider.build(NewProvider(user_id="u1", specialty="Roofer"), entity_id="p1", created_at=NOW)

    with pytest.raises(ValueError):
        merge(provider, {name: "yes"})
    assert getattr(merge(provider, {name: False}), name) is False
