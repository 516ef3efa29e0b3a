"""Behaviour specific to the in-memory backend."""
from __future__ import annotations

import asyncio
from concurrent.futures import ThreadPoolExecutor

import pytest

from localfix.domain import NewProvider, NewUser
from localfix.repositories import MemoryStorage


def _new_user(email: str = "jane@example.com") -> NewUser:
    return NewUser(email=email, password_hash="hash", first_name="Jane", last_name="Doe")


@pytest.mark.asyncio
async def test_new_store_is_empty_until_initialized(memory_storage):
    assert await memory_storage.list_users() == []
    assert await memory_storage.list_service_categories() == []

    await memory_storage.initialize()

    assert len(await memory_storage.list_service_categories()) == 8
    assert len(await memory_storage.list_users()) == 4


@pytest.mark.asyncio
async def test_initialize_seeds_once_per_instance(memory_storage):
    await memory_storage.initialize()
    await memory_storage.initialize()

    assert len(await memory_storage.list_service_categories()) == 8
    assert len(await memory_storage.list_providers()) == 3


@pytest.mark.asyncio
async def test_instances_do_not_share_state():
    first = MemoryStorage()
    second = MemoryStorage()

    await first.create_user(_new_user())

    assert len(await first.list_users()) == 1
    assert await second.list_users() == []


@pytest.mark.asyncio
async def test_returned_records_are_copies(memory_storage):
    user = await memory_storage.create_user(_new_user())
    provider = await memory_storage.create_provider(
        NewProvider(user_id=user.id, specialty="Roofer", categories=["cat-1"])
    )

    user.first_name = "Changed"
    provider.categories.append("cat-2")
    fetched = await memory_storage.get_provider(provider.id)
    fetched.categories.append("cat-3")

    assert (await memory_storage.get_user(user.id)).first_name == "Jane"
    assert (await memory_storage.get_provider(provider.id)).categories == ["cat-1"]


@pytest.mark.asyncio
async def test_list_keeps_insertion_order(memory_storage):
    emails = [f"user{i}@example.com" for i in range(5)]
    for email in emails:
        await memory_storage.create_user(_new_user(email))

    assert [u.email for u in await memory_storage.list_users()] == emails


def test_concurrent_creates_from_threads(memory_storage):
    def create(i: int) -> str:
        user = asyncio.run(memory_storage.create_user(_new_user(f"user{i}@example.com")))
        return user.id

    with ThreadPoolExecutor(max_workers=8) as pool:
        ids = list(pool.map(create, range(50)))

    stored = asyncio.run(memory_storage.list_users())
    assert len(set(ids)) == 50
    assert {u.id for u in stored} == set(ids)


@pytest.mark.asyncio
async def test_initialize_retries_after_failed_seed(memory_storage, monkeypatch):
    from localfix.repositories import memory_repository

    real_seed = memory_repository.seed_reference_data
    calls = []

    async def flaky_seed(storage):
        calls.append(storage)
        if len(calls) == 1:
            raise RuntimeError("seed interrupted")
        return await real_seed(storage)

    monkeypatch.setattr(memory_repository, "seed_reference_data", flaky_seed)

    with pytest.raises(RuntimeError):
        await memory_storage.initialize()
    await memory_storage.initialize()

    assert len(calls) == 2
    assert len(await memory_storage.list_service_categories()) == 8
