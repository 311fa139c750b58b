"""OpenWeather lookup for the weather advisory context, cached in Redis."""

from __future__ import annotations

import json
from typing import Any

import httpx
import structlog
from pydantic import ValidationError
from redis.asyncio import Redis

from cropwatch.config import get_settings
from cropwatch.schemas.weather import WeatherRead

logger = structlog.get_logger("cropwatch.weather")


class WeatherUnavailableError(RuntimeError):
	"""Raised when the weather provider cannot answer (config, network, 5xx)."""


class WeatherService:
	def __init__(
		self,
		redis_client: Redis | None = None,
		transport: httpx.AsyncBaseTransport | None = None,
	):
		self.redis_client = redis_client
		self.transport = transport
		self.settings = get_settings()

	async def get_weather(self, location: str) -> WeatherRead:
		city = location.strip()
		if not city:
			raise ValueError("City parameter is required")

		cache_key = f"weather:{city.lower()}"
		if self.redis_client is not None:
			cached = await self._read_cache(cache_key)
			if cached is not None:
				return cached

		weather = self.parse_payload(await self._fetch(city))

		if self.redis_client is not None:
			await self.redis_client.setex(
				cache_key,
				self.settings.weather_cache_ttl_seconds,
				weather.model_dump_json(),
			)
		return weather

	async def _read_cache(self, cache_key: str) -> WeatherRead | None:
		"""Return the cached reading, or ``None`` on a miss or an unreadable entry."""
		cached = await self.redis_client.get(cache_key)
		if cached is None:
			return None
		try:
			return WeatherRead(**json.loads(cached))
		except (ValueError, TypeError, ValidationError) as exc:
			logger.warning("weather_cache_unreadable", cache_key=cache_key, error=str(exc))
			await self.redis_client.delete(cache_key)
			return None

	async def _fetch(self, city: str) -> dict[str, Any]:
		if not self.settings.openweather_api_key:
			logger.error("weather_api_key_missing")
			raise WeatherUnavailableError("Weather API key not configured")

		params = {
			"q": city,
			"appid": self.settings.openweather_api_key,
			"units": "metric",
		}
		logger.info("weather_fetch", city=city)
		try:
			async with httpx.AsyncClient(
				timeout=self.settings.openweather_timeout_seconds,
				transport=self.transport,
			) as client:
				response = await client.get(self.settings.openweather_base_url, params=params)
		except httpx.HTTPError as exc:
			logger.warning("weather_fetch_failed", city=city, error=str(exc))
			raise WeatherUnavailableError(f"Failed to fetch weather data: {exc}") from exc

		if response.status_code == 404:
			raise LookupError(f"City {city!r} not found")
		if response.is_error:
			logger.warning("weather_upstream_error", city=city, status_code=response.status_code, body=response.text)
			raise WeatherUnavailableError("Failed to fetch weather data")
		try:
			return response.json()
		except ValueError as exc:
			raise WeatherUnavailableError("Weather provider returned invalid JSON") from exc

	@staticmethod
	def parse_payload(data: dict[str, Any]) -> WeatherRead:
		try:
			condition = data["weather"][0]
			return WeatherRead(
				temperature=data["main"]["temp"],
				humidity=data["main"]["humidity"],
				description=condition["description"],
				icon=condition.get("icon"),
				city=data["name"],
				country=data["sys"]["country"],
			)
		except (KeyError, IndexError, TypeError, ValidationError) as exc:
			raise WeatherUnavailableError(f"Unexpected weather payload: {exc}") from exc
