"""
In-process storage backend.

Keeps every collection in a dict keyed by id. Nothing survives a restart;
the application selects this backend when running in test mode.
"""
from __future__ import annotations

import copy
import logging
import threading
from typing import Callable, Generic, Optional, TypeVar

from localfix.domain import (
    Booking,
    NewBooking,
    NewProvider,
    NewProviderCategory,
    NewReview,
    NewServiceCategory,
    NewUser,
    Provider,
    ProviderCategory,
    ProviderWithUser,
    Review,
    ServiceCategory,
    User,
    merge,
)
from localfix.services.seed_service import seed_reference_data

from .base import Storage, Updates, new_id, utcnow

logger = logging.getLogger(__name__)

T = TypeVar("T")


class _Collection(Generic[T]):
    """Lock-guarded dict of records. Records are copied on the way in and out."""

    def __init__(self) -> None:
        self._items: dict[str, T] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[T]:
        with self._lock:
            item = self._items.get(key)
            return copy.deepcopy(item) if item is not None else None

    def values(self) -> list[T]:
        with self._lock:
            return copy.deepcopy(list(self._items.values()))

    def add(self, key: str, item: T) -> T:
        with self._lock:
            self._items[key] = copy.deepcopy(item)
        return item

    def update(self, key: str, change: Callable[[T], T]) -> Optional[T]:
        with self._lock:
            current = self._items.get(key)
            if current is None:
                return None
            changed = change(current)
            self._items[key] = copy.deepcopy(changed)
            return changed

    def remove(self, key: str) -> bool:
        with self._lock:
            return self._items.pop(key, None) is not None


class MemoryStorage(Storage):
    """Volatile Storage implementation; seeded on initialize()."""

    name = "memory"

    def __init__(self) -> None:
        self._users: _Collection[User] = _Collection()
        self._categories: _Collection[ServiceCategory] = _Collection()
        self._providers: _Collection[Provider] = _Collection()
        self._provider_categories: _Collection[ProviderCategory] = _Collection()
        self._bookings: _Collection[Booking] = _Collection()
        self._reviews: _Collection[Review] = _Collection()
        self._seeded = False

    async def initialize(self) -> None:
        # Every instance starts empty, so seeding is unconditional.
        if self._seeded:
            return
        report = await seed_reference_data(self)
        self._seeded = True
        logger.info("Seeded in-memory storage", extra={"seed": report.as_dict()})

    # -------------------------- users --------------------------
    async def get_user(self, user_id: str) -> Optional[User]:
        return self._users.get(user_id)

    async def get_user_by_email(self, email: str) -> Optional[User]:
        return next((user for user in self._users.values() if user.email == email), None)

    async def list_users(self) -> list[User]:
        return self._users.values()

    async def create_user(self, data: NewUser) -> User:
        user = User.build(data, entity_id=new_id(), created_at=utcnow())
        return self._users.add(user.id, user)

    async def update_user(self, user_id: str, updates: Updates) -> Optional[User]:
        return self._users.update(user_id, lambda user: merge(user, updates))

    # -------------------------- service categories --------------------------
    async def get_service_category(self, category_id: str) -> Optional[ServiceCategory]:
        return self._categories.get(category_id)

    async def list_service_categories(self) -> list[ServiceCategory]:
        return self._categories.values()

    async def create_service_category(self, data: NewServiceCategory) -> ServiceCategory:
        category = ServiceCategory.build(data, entity_id=new_id())
        return self._categories.add(category.id, category)

    # -------------------------- providers --------------------------
    async def get_provider(self, provider_id: str) -> Optional[Provider]:
        return self._providers.get(provider_id)

    async def get_provider_by_user_id(self, user_id: str) -> Optional[Provider]:
        return next((p for p in self._providers.values() if p.user_id == user_id), None)

    async def list_providers(
        self,
        *,
        category_id: Optional[str] = None,
        location: Optional[str] = None,
        is_approved: Optional[bool] = None,
    ) -> list[ProviderWithUser]:
        providers = self._providers.values()
        if is_approved is not None:
            providers = [p for p in providers if p.is_approved == is_approved]
        if location:
            needle = location.lower()
            providers = [p for p in providers if needle in (p.location or "").lower()]
        if category_id:
            providers = [p for p in providers if category_id in (p.categories or [])]
        return [ProviderWithUser.join(p, self._users.get(p.user_id)) for p in providers]

    async def create_provider(self, data: NewProvider) -> Provider:
        provider = Provider.build(data, entity_id=new_id(), created_at=utcnow())
        return self._providers.add(provider.id, provider)

    async def update_provider(self, provider_id: str, updates: Updates) -> Optional[Provider]:
        return self._providers.update(provider_id, lambda provider: merge(provider, updates))

    # -------------------------- provider categories --------------------------
    async def list_provider_categories(self, provider_id: str) -> list[ProviderCategory]:
        return [pc for pc in self._provider_categories.values() if pc.provider_id == provider_id]

    async def create_provider_category(self, data: NewProviderCategory) -> ProviderCategory:
        link = ProviderCategory.build(data, entity_id=new_id())
        return self._provider_categories.add(link.id, link)

    # -------------------------- bookings --------------------------
    async def get_booking(self, booking_id: str) -> Optional[Booking]:
        return self._bookings.get(booking_id)

    async def list_bookings(
        self,
        *,
        customer_id: Optional[str] = None,
        provider_id: Optional[str] = None,
        status: Optional[str] = None,
    ) -> list[Booking]:
        bookings = self._bookings.values()
        if customer_id:
            bookings = [b for b in bookings if b.customer_id == customer_id]
        if provider_id:
            bookings = [b for b in bookings if b.provider_id == provider_id]
        if status:
            bookings = [b for b in bookings if b.status == status]
        return bookings

    async def create_booking(self, data: NewBooking) -> Booking:
        booking = Booking.build(data, entity_id=new_id(), created_at=utcnow())
        return self._bookings.add(booking.id, booking)

    async def update_booking(self, booking_id: str, updates: Updates) -> Optional[Booking]:
        return self._bookings.update(booking_id, lambda booking: merge(booking, updates))

    # -------------------------- reviews --------------------------
    async def get_review(self, review_id: str) -> Optional[Review]:
        return self._reviews.get(review_id)

    async def list_reviews(self, provider_id: str) -> list[Review]:
        return [r for r in self._reviews.values() if r.provider_id == provider_id and r.is_visible]

    async def create_review(self, data: NewReview) -> Review:
        review = Review.build(data, entity_id=new_id(), created_at=utcnow())
        return self._reviews.add(review.id, review)

    async def update_review(self, review_id: str, updates: Updates) -> Optional[Review]:
        return self._reviews.update(review_id, lambda review: merge(review, updates))

    async def delete_review(self, review_id: str) -> bool:
        return self._reviews.remove(review_id)
