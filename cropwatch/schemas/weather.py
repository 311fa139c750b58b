"""Pydantic schema for the weather advisory context."""

from __future__ import annotations

from pydantic import BaseModel, Field


class WeatherRead(BaseModel):
	temperature: float
	humidity: float = Field(ge=0, le=100)
	description: str
	icon: str | None = None
	city: str
	country: str
