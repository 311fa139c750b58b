"""Crop, observation, trend and crop-view routes."""

from __future__ import annotations

import uuid
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from cropwatch.auth.dependencies import OwnerPrincipal, get_current_owner
from cropwatch.database import get_db
from cropwatch.schemas.crop import CropCreate, CropListRead, CropRead
from cropwatch.schemas.health import CropViewResponse, ObservationReceipt, TrendResponse
from cropwatch.schemas.observation import ObservationCreate, ObservationListRead
from cropwatch.services.crop_service import CropService
from cropwatch.services.monitoring_service import MonitoringService

router = APIRouter(prefix="/crops", tags=["crops"])


def _map_error(exc: Exception) -> HTTPException:
	if isinstance(exc, LookupError):
		return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
	if isinstance(exc, ValueError):
		return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
	return HTTPException(
		status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
		detail="Unexpected crop service failure",
	)


def _monitoring(request: Request, db: AsyncSession) -> MonitoringService:
	return MonitoringService(db, getattr(request.app.state, "redis", None))


def _to_crop_read(crop: Any) -> CropRead:
	return CropRead.model_validate(crop)


@router.post("", response_model=CropRead, status_code=status.HTTP_201_CREATED)
async def create_crop(
	payload: CropCreate,
	db: AsyncSession = Depends(get_db),
	owner: OwnerPrincipal = Depends(get_current_owner),
) -> CropRead:
	service = CropService(db)
	try:
		crop = await service.create_crop(owner.owner_id, payload)
	except Exception as exc:
		raise _map_error(exc) from exc
	return _to_crop_read(crop)


@router.get("", response_model=CropListRead)
async def list_crops(
	db: AsyncSession = Depends(get_db),
	owner: OwnerPrincipal = Depends(get_current_owner),
) -> CropListRead:
	service = CropService(db)
	try:
		crops = await service.list_crops(owner.owner_id)
	except Exception as exc:
		raise _map_error(exc) from exc
	return CropListRead(items=[_to_crop_read(crop) for crop in crops])


@router.get("/{crop_id}", response_model=CropRead)
async def get_crop(
	crop_id: uuid.UUID,
	db: AsyncSession = Depends(get_db),
	owner: OwnerPrincipal = Depends(get_current_owner),
) -> CropRead:
	service = CropService(db)
	try:
		crop = await service.get_crop(crop_id, owner.owner_id)
	except Exception as exc:
		raise _map_error(exc) from exc
	return _to_crop_read(crop)


@router.get("/{crop_id}/view", response_model=CropViewResponse)
async def get_crop_view(
	crop_id: uuid.UUID,
	request: Request,
	location: str | None = Query(default=None, max_length=100),
	db: AsyncSession = Depends(get_db),
	owner: OwnerPrincipal = Depends(get_current_owner),
) -> CropViewResponse:
	service = _monitoring(request, db)
	try:
		return await service.get_crop_view(crop_id, owner.owner_id, location=location)
	except Exception as exc:
		raise _map_error(exc) from exc


@router.get("/{crop_id}/observations", response_model=ObservationListRead)
async def list_observations(
	crop_id: uuid.UUID,
	request: Request,
	db: AsyncSession = Depends(get_db),
	owner: OwnerPrincipal = Depends(get_current_owner),
) -> ObservationListRead:
	service = _monitoring(request, db)
	try:
		return await service.list_observations(crop_id, owner.owner_id)
	except Exception as exc:
		raise _map_error(exc) from exc


@router.post(
	"/{crop_id}/observations",
	response_model=ObservationReceipt,
	status_code=status.HTTP_201_CREATED,
)
async def record_observation(
	crop_id: uuid.UUID,
	payload: ObservationCreate,
	request: Request,
	db: AsyncSession = Depends(get_db),
	owner: OwnerPrincipal = Depends(get_current_owner),
) -> ObservationReceipt:
	service = _monitoring(request, db)
	try:
		return await service.record_observation(crop_id, owner.owner_id, payload)
	except Exception as exc:
		raise _map_error(exc) from exc


@router.get("/{crop_id}/trend", response_model=TrendResponse)
async def get_trend(
	crop_id: uuid.UUID,
	request: Request,
	db: AsyncSession = Depends(get_db),
	owner: OwnerPrincipal = Depends(get_current_owner),
) -> TrendResponse:
	service = _monitoring(request, db)
	try:
		return await service.get_trend(crop_id, owner.owner_id)
	except Exception as exc:
		raise _map_error(exc) from exc
