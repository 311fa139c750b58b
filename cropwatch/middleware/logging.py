"""structlog setup and the per-request logging middleware.

Both structlog loggers and plain ``logging`` loggers (uvicorn, SQLAlchemy,
the startup logger in ``main``) end up in the same renderer, so every line
the process writes is either JSON or console-formatted, never a mix.
"""

from __future__ import annotations

import logging
import time
import uuid
from typing import Any

import structlog
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from cropwatch.auth.dependencies import extract_request_crop_id
from cropwatch.config import LogFormat, get_settings

REQUEST_ID_HEADER = "x-request-id"

_configured = False


def _renderer(log_format: LogFormat) -> Any:
	if log_format == LogFormat.console:
		return structlog.dev.ConsoleRenderer()
	return structlog.processors.JSONRenderer()


def configure_structured_logging() -> None:
	"""Route structlog and stdlib logging through one renderer; idempotent."""
	global _configured
	if _configured:
		return

	settings = get_settings()
	level = logging.getLevelName(settings.log_level.upper())
	pre_chain: list[Any] = [
		structlog.contextvars.merge_contextvars,
		structlog.stdlib.add_logger_name,
		structlog.stdlib.add_log_level,
		structlog.processors.TimeStamper(fmt="iso", utc=True),
	]

	handler = logging.StreamHandler()
	handler.setFormatter(
		structlog.stdlib.ProcessorFormatter(
			foreign_pre_chain=pre_chain,
			processors=[
				structlog.stdlib.ProcessorFormatter.remove_processors_meta,
				structlog.processors.format_exc_info,
				_renderer(settings.log_format),
			],
		)
	)
	root = logging.getLogger()
	root.handlers = [handler]
	root.setLevel(level)

	structlog.configure(
		processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
		logger_factory=structlog.stdlib.LoggerFactory(),
		wrapper_class=structlog.stdlib.BoundLogger,
		cache_logger_on_first_use=True,
	)
	_configured = True


class RequestLoggingMiddleware(BaseHTTPMiddleware):
	"""Bind a request id (and crop id, when the path names one) for every log line."""

	async def dispatch(self, request: Request, call_next):  # type: ignore[override]
		request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
		request.state.request_id = request_id

		context: dict[str, Any] = {"request_id": request_id}
		crop_id = extract_request_crop_id(request)
		if crop_id is not None:
			context["crop_id"] = str(crop_id)
		structlog.contextvars.clear_contextvars()
		structlog.contextvars.bind_contextvars(**context)

		log = structlog.get_logger("cropwatch.request").bind(method=request.method, path=request.url.path)
		started = time.perf_counter()
		try:
			response = await call_next(request)
		except Exception:
			log.exception("request_failed", elapsed_ms=_elapsed_ms(started))
			raise

		response.headers[REQUEST_ID_HEADER] = request_id
		log.info("request_completed", status_code=response.status_code, elapsed_ms=_elapsed_ms(started))
		return response


def _elapsed_ms(started: float) -> float:
	return round((time.perf_counter() - started) * 1000.0, 2)
