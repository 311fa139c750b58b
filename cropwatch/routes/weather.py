"""Weather advisory and dashboard routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from cropwatch.auth.dependencies import OwnerPrincipal, get_current_owner
from cropwatch.config import get_settings
from cropwatch.database import get_db
from cropwatch.schemas.health import DashboardResponse
from cropwatch.schemas.weather import WeatherRead
from cropwatch.services.monitoring_service import MonitoringService
from cropwatch.services.weather_service import WeatherService, WeatherUnavailableError

router = APIRouter(tags=["weather"])


def _map_error(exc: Exception) -> HTTPException:
	if isinstance(exc, LookupError):
		return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
	if isinstance(exc, ValueError):
		return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
	if isinstance(exc, WeatherUnavailableError):
		return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))
	return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="weather failure")


@router.get("/weather", response_model=WeatherRead)
async def get_weather(
	request: Request,
	city: str | None = Query(default=None, max_length=100),
	_owner: OwnerPrincipal = Depends(get_current_owner),
) -> WeatherRead:
	service = WeatherService(getattr(request.app.state, "redis", None))
	try:
		return await service.get_weather(city if city is not None else get_settings().default_location)
	except Exception as exc:
		raise _map_error(exc) from exc


@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(
	request: Request,
	location: str | None = Query(default=None, max_length=100),
	db: AsyncSession = Depends(get_db),
	owner: OwnerPrincipal = Depends(get_current_owner),
) -> DashboardResponse:
	service = MonitoringService(db, getattr(request.app.state, "redis", None))
	try:
		return await service.get_dashboard(owner.owner_id, location)
	except Exception as exc:
		raise _map_error(exc) from exc
