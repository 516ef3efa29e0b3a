"""Durable storage backed by SQLAlchemy.

Every port call opens one session, issues one request and closes it. The
driver work runs in a worker thread so callers await the round trip.
"""
from __future__ import annotations

import asyncio
import logging
from contextlib import contextmanager
from dataclasses import asdict, fields
from datetime import datetime, timezone
from typing import Any, Callable, Iterator, Optional, TypeVar

from sqlalchemy import and_, delete, func, select, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from localfix.core.errors import ConnectivityError
from localfix.db.create_tables import create_all
from localfix.db.models import (
    BookingRow,
    ProviderCategoryRow,
    ProviderRow,
    ReviewRow,
    ServiceCategoryRow,
    UserRow,
)
from localfix.db.session import get_engine, session_factory
from localfix.domain import (
    Booking,
    DecimalString,
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
E = TypeVar("E")


def _as_utc(value: Any) -> Any:
    # SQLite hands back naive datetimes for timezone-aware columns.
    if not isinstance(value, datetime):
        return value
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _to_entity(entity_cls: type[E], row: Any) -> E:
    return entity_cls(**{f.name: _as_utc(getattr(row, f.name)) for f in fields(entity_cls)})


def _row_values(entity: Any) -> dict[str, Any]:
    values = asdict(entity)
    return {
        name: str(value) if isinstance(value, DecimalString) else value
        for name, value in values.items()
    }


class SQLStorage(Storage):
    """Storage implementation persisting to a relational database."""

    name = "sql"

    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine or get_engine()
        self._sessionmaker = session_factory(self._engine)

    @contextmanager
    def _session(self) -> Iterator[Session]:
        session: Session = self._sessionmaker()
        try:
            yield session
        finally:
            session.close()

    async def _run(self, work: Callable[[Session], T]) -> T:
        def call() -> T:
            with self._session() as session:
                return work(session)

        return await asyncio.to_thread(call)

    # -------------------------- lifecycle --------------------------
    async def connect(self) -> None:
        """Probe the database; raise ConnectivityError when it cannot be reached."""

        def probe() -> None:
            with self._engine.connect() as conn:
                conn.execute(text("SELECT 1"))

        try:
            await asyncio.to_thread(probe)
        except SQLAlchemyError as exc:
            raise ConnectivityError(f"Database connection failed: {exc}") from exc

    async def initialize(self) -> None:
        await asyncio.to_thread(create_all, self._engine)
        existing = await self._run(
            lambda s: s.execute(select(func.count()).select_from(ServiceCategoryRow)).scalar_one()
        )
        if existing:
            logger.info("Reference data already present; skipping seed", extra={"categories": existing})
            return
        report = await seed_reference_data(self)
        logger.info("Seeded SQL storage", extra={"seed": report.as_dict()})

    async def close(self) -> None:
        await asyncio.to_thread(self._engine.dispose)

    # -------------------------- generic helpers --------------------------
    async def _get(self, row_cls: type, entity_cls: type[E], entity_id: str) -> Optional[E]:
        def work(session: Session) -> Optional[E]:
            row = session.get(row_cls, entity_id)
            return _to_entity(entity_cls, row) if row is not None else None

        return await self._run(work)

    async def _select(
        self, row_cls: type, entity_cls: type[E], *criteria: Any, limit: Optional[int] = None
    ) -> list[E]:
        def work(session: Session) -> list[E]:
            stmt = select(row_cls)
            if criteria:
                stmt = stmt.where(and_(*criteria))
            if hasattr(row_cls, "created_at"):
                stmt = stmt.order_by(row_cls.created_at)
            if limit is not None:
                stmt = stmt.limit(limit)
            return [_to_entity(entity_cls, row) for row in session.execute(stmt).scalars()]

        return await self._run(work)

    async def _first(self, row_cls: type, entity_cls: type[E], *criteria: Any) -> Optional[E]:
        rows = await self._select(row_cls, entity_cls, *criteria, limit=1)
        return rows[0] if rows else None

    async def _insert(self, row_cls: type, entity_cls: type[E], entity: E) -> E:
        def work(session: Session) -> E:
            row = row_cls(**_row_values(entity))
            session.add(row)
            session.commit()
            session.refresh(row)
            return _to_entity(entity_cls, row)

        return await self._run(work)

    async def _update(self, row_cls: type, entity_cls: type[E], entity_id: str, updates: Updates) -> Optional[E]:
        def work(session: Session) -> Optional[E]:
            row = session.get(row_cls, entity_id)
            if row is None:
                return None
            merged = merge(_to_entity(entity_cls, row), updates)
            for name, value in _row_values(merged).items():
                if name in updates:
                    setattr(row, name, value)
            session.commit()
            session.refresh(row)
            return _to_entity(entity_cls, row)

        return await self._run(work)

    # -------------------------- users --------------------------
    async def get_user(self, user_id: str) -> Optional[User]:
        return await self._get(UserRow, User, user_id)

    async def get_user_by_email(self, email: str) -> Optional[User]:
        return await self._first(UserRow, User, UserRow.email == email)

    async def list_users(self) -> list[User]:
        return await self._select(UserRow, User)

    async def create_user(self, data: NewUser) -> User:
        user = User.build(data, entity_id=new_id(), created_at=utcnow())
        return await self._insert(UserRow, User, user)

    async def update_user(self, user_id: str, updates: Updates) -> Optional[User]:
        return await self._update(UserRow, User, user_id, updates)

    # -------------------------- service categories --------------------------
    async def get_service_category(self, category_id: str) -> Optional[ServiceCategory]:
        return await self._get(ServiceCategoryRow, ServiceCategory, category_id)

    async def list_service_categories(self) -> list[ServiceCategory]:
        return await self._select(ServiceCategoryRow, ServiceCategory)

    async def create_service_category(self, data: NewServiceCategory) -> ServiceCategory:
        category = ServiceCategory.build(data, entity_id=new_id())
        return await self._insert(ServiceCategoryRow, ServiceCategory, category)

    # -------------------------- providers --------------------------
    async def get_provider(self, provider_id: str) -> Optional[Provider]:
        return await self._get(ProviderRow, Provider, provider_id)

    async def get_provider_by_user_id(self, user_id: str) -> Optional[Provider]:
        return await self._first(ProviderRow, Provider, ProviderRow.user_id == user_id)

    async def list_providers(
        self,
        *,
        category_id: Optional[str] = None,
        location: Optional[str] = None,
        is_approved: Optional[bool] = None,
    ) -> list[ProviderWithUser]:
        conditions = []
        if is_approved is not None:
            conditions.append(ProviderRow.is_approved == is_approved)
        if location:
            conditions.append(ProviderRow.location.icontains(location, autoescape=True))

        def work(session: Session) -> list[ProviderWithUser]:
            stmt = select(ProviderRow).order_by(ProviderRow.created_at)
            if conditions:
                stmt = stmt.where(and_(*conditions))
            providers = [_to_entity(Provider, row) for row in session.execute(stmt).scalars()]
            # categories is a JSON column, so membership is checked after the fetch.
            if category_id:
                providers = [p for p in providers if category_id in (p.categories or [])]
            user_ids = {p.user_id for p in providers}
            users: dict[str, User] = {}
            if user_ids:
                rows = session.execute(select(UserRow).where(UserRow.id.in_(sorted(user_ids)))).scalars()
                users = {row.id: _to_entity(User, row) for row in rows}
            return [ProviderWithUser.join(p, users.get(p.user_id)) for p in providers]

        return await self._run(work)

    async def create_provider(self, data: NewProvider) -> Provider:
        provider = Provider.build(data, entity_id=new_id(), created_at=utcnow())
        return await self._insert(ProviderRow, Provider, provider)

    async def update_provider(self, provider_id: str, updates: Updates) -> Optional[Provider]:
        return await self._update(ProviderRow, Provider, provider_id, updates)

    # -------------------------- provider categories --------------------------
    async def list_provider_categories(self, provider_id: str) -> list[ProviderCategory]:
        return await self._select(
            ProviderCategoryRow, ProviderCategory, ProviderCategoryRow.provider_id == provider_id
        )

    async def create_provider_category(self, data: NewProviderCategory) -> ProviderCategory:
        link = ProviderCategory.build(data, entity_id=new_id())
        return await self._insert(ProviderCategoryRow, ProviderCategory, link)

    # -------------------------- bookings --------------------------
    async def get_booking(self, booking_id: str) -> Optional[Booking]:
        return await self._get(BookingRow, Booking, booking_id)

    async def list_bookings(
        self,
        *,
        customer_id: Optional[str] = None,
        provider_id: Optional[str] = None,
        status: Optional[str] = None,
    ) -> list[Booking]:
        conditions = []
        if customer_id:
            conditions.append(BookingRow.customer_id == customer_id)
        if provider_id:
            conditions.append(BookingRow.provider_id == provider_id)
        if status:
            conditions.append(BookingRow.status == str(getattr(status, "value", status)))
        return await self._select(BookingRow, Booking, *conditions)

    async def create_booking(self, data: NewBooking) -> Booking:
        booking = Booking.build(data, entity_id=new_id(), created_at=utcnow())
        return await self._insert(BookingRow, Booking, booking)

    async def update_booking(self, booking_id: str, updates: Updates) -> Optional[Booking]:
        return await self._update(BookingRow, Booking, booking_id, updates)

    # -------------------------- reviews --------------------------
    async def get_review(self, review_id: str) -> Optional[Review]:
        return await self._get(ReviewRow, Review, review_id)

    async def list_reviews(self, provider_id: str) -> list[Review]:
        return await self._select(
            ReviewRow, Review, ReviewRow.provider_id == provider_id, ReviewRow.is_visible.is_(True)
        )

    async def create_review(self, data: NewReview) -> Review:
        review = Review.build(data, entity_id=new_id(), created_at=utcnow())
        return await self._insert(ReviewRow, Review, review)

    async def update_review(self, review_id: str, updates: Updates) -> Optional[Review]:
        return await self._update(ReviewRow, Review, review_id, updates)

    async def delete_review(self, review_id: str) -> bool:
        def work(session: Session) -> bool:
            result = session.execute(delete(ReviewRow).where(ReviewRow.id == review_id))
            session.commit()
            return result.rowcount > 0

        return await self._run(work)
