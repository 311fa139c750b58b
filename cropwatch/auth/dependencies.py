"""Authentication dependencies: bearer token to crop owner."""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass

from fastapi import HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from cropwatch.auth.jwt import AuthError, decode_token

bearer_scheme = HTTPBearer(auto_error=False)

_CROP_PATH = re.compile(r"/api/v1/crops/([0-9a-fA-F\-]{36})(?:/|$)")


@dataclass(slots=True)
class OwnerPrincipal:
	owner_id: uuid.UUID
	auth_type: str = "jwt"


def _raise_auth(exc: AuthError) -> HTTPException:
	return HTTPException(
		status_code=exc.status_code,
		detail={"error": exc.code, "message": exc.detail},
	)


def owner_from_token(token: str) -> uuid.UUID:
	"""Decode an access token and return its subject as an owner UUID."""
	claims = decode_token(token, expected_type="access")
	try:
		return uuid.UUID(claims.subject)
	except ValueError as exc:
		raise AuthError(code="token_invalid", detail="Token subject is invalid") from exc


def extract_request_crop_id(request: Request) -> uuid.UUID | None:
	token = request.path_params.get("crop_id")
	if token is None:
		match = _CROP_PATH.search(request.url.path)
		if match is None:
			return None
		token = match.group(1)
	try:
		return uuid.UUID(str(token))
	except ValueError:
		return None


def extract_identity_hint(request: Request) -> str:
	auth_header = request.headers.get("authorization", "")
	if auth_header.lower().startswith("bearer "):
		return "jwt"
	return "anonymous"


async def get_current_owner(request: Request) -> OwnerPrincipal:
	credentials: HTTPAuthorizationCredentials | None = await bearer_scheme(request)
	if credentials is None or credentials.scheme.lower() != "bearer":
		raise _raise_auth(AuthError(code="auth_required", detail="Bearer token is required"))
	try:
		owner_id = owner_from_token(credentials.credentials)
	except AuthError as exc:
		raise _raise_auth(exc) from exc
	return OwnerPrincipal(owner_id=owner_id)
