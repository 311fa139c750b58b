"""Shared pytest fixtures: async test clients plus fake DB session and Redis."""

from __future__ import annotations

import uuid
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from cropwatch.auth.dependencies import OwnerPrincipal, get_current_owner
from cropwatch.auth.jwt import create_access_token
from cropwatch.database import get_db
from cropwatch.main import app

from factories import OWNER_ID


class FakeAsyncSession:
	def __init__(self) -> None:
		self.commit = AsyncMock()
		self.rollback = AsyncMock()
		self.close = AsyncMock()
		self.execute = AsyncMock()
		self.flush = AsyncMock()
		self.refresh = AsyncMock()
		self.added: list[Any] = []

	def add(self, instance: Any) -> None:
		self.added.append(instance)


class FakePubSub:
	def __init__(self, payloads: list[dict[str, Any]]) -> None:
		self.payloads = payloads
		self.index = 0
		self.subscribed_channel: str | None = None
		self.unsubscribed_channel: str | None = None
		self.closed = False

	async def subscribe(self, channel: str) -> None:
		self.subscribed_channel = channel

	async def get_message(self, ignore_subscribe_messages: bool, timeout: float) -> dict[str, Any] | None:
		if self.index >= len(self.payloads):
			return None
		message = self.payloads[self.index]
		self.index += 1
		return message

	async def unsubscribe(self, channel: str) -> None:
		self.unsubscribed_channel = channel

	async def close(self) -> None:
		self.closed = True


class FakeRedis:
	def __init__(self, payloads: list[dict[str, Any]] | None = None) -> None:
		self.payloads = payloads or []
		self.publish = AsyncMock()
		self.store: dict[str, str] = {}
		self.get = AsyncMock(side_effect=self._get)
		self.setex = AsyncMock(side_effect=self._setex)
		self.delete = AsyncMock(side_effect=self._delete)
		self._counter: dict[str, int] = {}
		self.incr = AsyncMock(side_effect=self._incr)
		self.expire = AsyncMock(return_value=True)
		self.last_pubsub: FakePubSub | None = None

	async def _get(self, key: str) -> str | None:
		return self.store.get(key)

	async def _setex(self, key: str, _ttl: int, value: str) -> bool:
		self.store[key] = value
		return True

	async def _delete(self, key: str) -> int:
		return 1 if self.store.pop(key, None) is not None else 0

	async def _incr(self, key: str) -> int:
		value = self._counter.get(key, 0) + 1
		self._counter[key] = value
		return value

	def pubsub(self) -> FakePubSub:
		self.last_pubsub = FakePubSub(self.payloads)
		return self.last_pubsub


@pytest.fixture
def fake_db_session() -> FakeAsyncSession:
	"""A lightweight async-session stub for dependency overrides in API tests."""
	return FakeAsyncSession()


@pytest.fixture
def fake_redis() -> FakeRedis:
	"""Reusable fake Redis client with async publish, cache and pubsub behavior."""
	return FakeRedis()


@pytest.fixture
def owner_id() -> uuid.UUID:
	return OWNER_ID


@asynccontextmanager
async def _noop_lifespan(_: Any) -> AsyncGenerator[None, None]:
	yield


@pytest.fixture
async def client(fake_db_session: FakeAsyncSession, owner_id: uuid.UUID) -> AsyncGenerator[AsyncClient, None]:
	"""HTTPX async client with lifespan disabled, DB and owner dependencies mocked."""

	async def override_get_db() -> AsyncGenerator[Any, None]:
		yield fake_db_session

	async def override_current_owner() -> OwnerPrincipal:
		return OwnerPrincipal(owner_id=owner_id)

	app.dependency_overrides[get_db] = override_get_db
	app.dependency_overrides[get_current_owner] = override_current_owner
	app.state.redis = None
	original_lifespan = app.router.lifespan_context
	app.router.lifespan_context = _noop_lifespan

	transport = ASGITransport(app=app)
	async with AsyncClient(transport=transport, base_url="http://test") as test_client:
		yield test_client

	app.router.lifespan_context = original_lifespan
	app.dependency_overrides.clear()


@pytest.fixture
async def auth_client(fake_db_session: FakeAsyncSession) -> AsyncGenerator[AsyncClient, None]:
	"""HTTPX async client with DB override only (real auth dependency active)."""

	async def override_get_db() -> AsyncGenerator[Any, None]:
		yield fake_db_session

	app.dependency_overrides[get_db] = override_get_db
	app.state.redis = None
	original_lifespan = app.router.lifespan_context
	app.router.lifespan_context = _noop_lifespan

	transport = ASGITransport(app=app)
	async with AsyncClient(transport=transport, base_url="http://test") as test_client:
		yield test_client

	app.router.lifespan_context = original_lifespan
	app.dependency_overrides.clear()


@pytest.fixture
def access_token(owner_id: uuid.UUID) -> str:
	return create_access_token(str(owner_id), expires_minutes=30)
