"""Fixed-window request quota per crop, counted in Redis."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from cropwatch.auth.dependencies import extract_identity_hint, extract_request_crop_id
from cropwatch.config import get_settings

WINDOW_SECONDS = 60
_BYPASS_PREFIXES = ("/docs", "/redoc", "/openapi", "/health")


def bucket_key(crop_id: uuid.UUID, identity: str, now: datetime) -> str:
	"""One counter per crop, caller kind and wall-clock minute."""
	return f"ratelimit:crop:{crop_id}:{identity}:{now:%Y%m%d%H%M}"


class RateLimitMiddleware(BaseHTTPMiddleware):
	"""Reject requests beyond ``rate_limit_per_minute`` for a single crop.

	Only paths that name a crop are counted.  Without Redis the limiter is
	off rather than failing requests.
	"""

	async def dispatch(self, request: Request, call_next):  # type: ignore[override]
		redis_client = getattr(request.app.state, "redis", None)
		crop_id = None if request.url.path.startswith(_BYPASS_PREFIXES) else extract_request_crop_id(request)
		if redis_client is None or crop_id is None:
			return await call_next(request)

		now = datetime.now(UTC)
		key = bucket_key(crop_id, extract_identity_hint(request), now)
		used = await redis_client.incr(key)
		if used == 1:
			# Outlive the minute bucket.
			await redis_client.expire(key, WINDOW_SECONDS + 5)

		quota = get_settings().rate_limit_per_minute
		if used <= quota:
			response = await call_next(request)
			response.headers["x-ratelimit-limit"] = str(quota)
			response.headers["x-ratelimit-remaining"] = str(quota - used)
			return response

		return JSONResponse(
			status_code=429,
			headers={"retry-after": str(WINDOW_SECONDS - now.second)},
			content={
				"detail": {
					"error": "rate_limited",
					"message": "Too many requests for this crop",
					"crop_id": str(crop_id),
					"quota": quota,
				}
			},
		)
