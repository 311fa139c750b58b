"""Bearer-token handling.

Tokens are minted by the identity provider in front of CropWatch (and by
``create_access_token`` for tests and local tooling).  The ``sub`` claim is
the owner UUID stored on every crop.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, Literal

from jose import ExpiredSignatureError, JWTError, jwt

from cropwatch.config import get_settings

TokenType = Literal["access", "refresh"]


@dataclass(slots=True)
class AuthError(Exception):
	"""Structured authentication error for consistent mapping at the edge."""

	code: str
	detail: str
	status_code: int = 401


@dataclass(frozen=True, slots=True)
class TokenClaims:
	subject: str
	token_type: str | None
	expires_at: datetime
	raw: dict[str, Any]


def create_access_token(subject: str, expires_minutes: int | None = None) -> str:
	settings = get_settings()
	issued_at = datetime.now(UTC)
	lifetime = timedelta(minutes=expires_minutes or settings.jwt_access_token_expire_minutes)
	claims: dict[str, Any] = {
		"sub": subject,
		"typ": "access",
		"iat": issued_at,
		"exp": issued_at + lifetime,
	}
	if settings.jwt_issuer:
		claims["iss"] = settings.jwt_issuer
	return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str, expected_type: TokenType | None = None) -> TokenClaims:
	"""Verify signature, expiry, issuer (when configured) and token type."""
	settings = get_settings()
	try:
		payload = jwt.decode(
			token,
			settings.jwt_secret,
			algorithms=[settings.jwt_algorithm],
			issuer=settings.jwt_issuer,
			options={"require_exp": True, "require_sub": True},
		)
	except ExpiredSignatureError as exc:
		raise AuthError(code="token_expired", detail="Authentication token has expired") from exc
	except JWTError as exc:
		raise AuthError(code="token_invalid", detail="Invalid authentication token") from exc

	subject = payload.get("sub")
	if not isinstance(subject, str) or not subject:
		raise AuthError(code="token_invalid", detail="Token subject is missing")

	token_type = payload.get("typ")
	if expected_type is not None and token_type != expected_type:
		raise AuthError(code="token_type_invalid", detail=f"Expected {expected_type} token")

	return TokenClaims(
		subject=subject,
		token_type=token_type,
		expires_at=datetime.fromtimestamp(payload["exp"], UTC),
		raw=payload,
	)
