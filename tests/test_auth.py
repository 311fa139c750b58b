from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID, uuid4

import pytest
from httpx import AsyncClient

from cropwatch.auth.dependencies import owner_from_token
from cropwatch.auth.jwt import AuthError, create_access_token, decode_token
from cropwatch.main import app
from cropwatch.schemas.crop import CropListRead
from cropwatch.services.crop_service import CropService
from cropwatch.services.monitoring_service import MonitoringService


@pytest.mark.asyncio
async def test_missing_jwt_rejected_on_protected_endpoint(auth_client: AsyncClient) -> None:
	response = await auth_client.get(f"/api/v1/crops/{uuid4()}/view")
	assert response.status_code == 401
	assert response.json()["detail"]["error"] == "auth_required"


@pytest.mark.asyncio
async def test_invalid_jwt_rejected(auth_client: AsyncClient) -> None:
	response = await auth_client.get("/api/v1/crops", headers={"Authorization": "Bearer not.a.token"})
	assert response.status_code == 401
	assert response.json()["detail"]["error"] == "token_invalid"


@pytest.mark.asyncio
async def test_valid_jwt_scopes_crops_to_owner(
	auth_client: AsyncClient,
	access_token: str,
	owner_id: UUID,
	monkeypatch: pytest.MonkeyPatch,
) -> None:
	seen: list[UUID] = []

	async def fake_list(self: CropService, _owner_id: UUID, limit: int | None = None) -> list[object]:
		seen.append(_owner_id)
		return []

	monkeypatch.setattr(CropService, "list_crops", fake_list)

	response = await auth_client.get("/api/v1/crops", headers={"Authorization": f"Bearer {access_token}"})
	assert response.status_code == 200
	assert CropListRead.model_validate(response.json()).items == []
	assert seen == [owner_id]


def test_jwt_create_decode_roundtrip(owner_id: UUID) -> None:
	token = create_access_token(str(owner_id), expires_minutes=5)
	claims = decode_token(token, expected_type="access")
	assert claims.subject == str(owner_id)
	assert claims.token_type == "access"
	assert owner_from_token(token) == owner_id


def test_decode_invalid_token_raises_auth_error() -> None:
	with pytest.raises(AuthError):
		decode_token("invalid.token.payload", expected_type="access")


def test_expired_token_is_reported_as_expired(owner_id: UUID) -> None:
	token = create_access_token(str(owner_id), expires_minutes=-1)
	with pytest.raises(AuthError) as excinfo:
		decode_token(token, expected_type="access")
	assert excinfo.value.code == "token_expired"


def test_token_subject_must_be_owner_uuid() -> None:
	token = create_access_token("grower@example.com", expires_minutes=5)
	with pytest.raises(AuthError) as excinfo:
		owner_from_token(token)
	assert excinfo.value.code == "token_invalid"


@pytest.mark.asyncio
async def test_rate_limit_per_crop(fake_redis: object, client: AsyncClient, monkeypatch: pytest.MonkeyPatch) -> None:
	crop_id = uuid4()
	app.state.redis = fake_redis

	@dataclass
	class _SettingsStub:
		rate_limit_per_minute: int = 1

	async def fake_trend(self: MonitoringService, _crop_id: object, _owner_id: object) -> object:
		raise LookupError("Crop not found")

	monkeypatch.setattr("cropwatch.middleware.rate_limit.get_settings", lambda: _SettingsStub())
	monkeypatch.setattr(MonitoringService, "get_trend", fake_trend)

	first = await client.get(f"/api/v1/crops/{crop_id}/trend")
	second = await client.get(f"/api/v1/crops/{crop_id}/trend")
	other_crop = await client.get(f"/api/v1/crops/{uuid4()}/trend")

	assert first.status_code == 404
	assert second.status_code == 429
	assert second.json()["detail"]["error"] == "rate_limited"
	assert second.json()["detail"]["crop_id"] == str(crop_id)
	assert first.headers["x-ratelimit-remaining"] == "0"
	assert "retry-after" in second.headers
	assert other_crop.status_code == 404


@pytest.mark.asyncio
async def test_rate_limit_skips_health_paths(fake_redis: object, client: AsyncClient, monkeypatch: pytest.MonkeyPatch) -> None:
	app.state.redis = fake_redis

	@dataclass
	class _SettingsStub:
		rate_limit_per_minute: int = 0

	monkeypatch.setattr("cropwatch.middleware.rate_limit.get_settings", lambda: _SettingsStub())

	response = await client.get("/health")
	assert response.status_code == 200
