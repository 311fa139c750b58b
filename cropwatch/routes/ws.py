"""WebSocket live feed of observation-appended events for one crop."""

from __future__ import annotations

import asyncio
import json
import uuid
from typing import Any

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from sqlalchemy import select

from cropwatch.auth.dependencies import owner_from_token
from cropwatch.auth.jwt import AuthError
from cropwatch.database import async_session_factory
from cropwatch.models.crops import Crop
from cropwatch.services.monitoring_service import live_channel

router = APIRouter(tags=["websocket"])

POLICY_VIOLATION = 1008
INTERNAL_ERROR = 1011


async def _crop_owned_by(crop_id: uuid.UUID, owner_id: uuid.UUID) -> bool:
	async with async_session_factory() as session:
		row = await session.execute(select(Crop.owner_id).where(Crop.id == crop_id))
		return row.scalar_one_or_none() == owner_id


async def _authenticate_token(token: str) -> uuid.UUID | None:
	try:
		return owner_from_token(token)
	except AuthError:
		return None


async def _reject(websocket: WebSocket, error: str, code: int = POLICY_VIOLATION) -> None:
	await websocket.send_json({"error": error})
	await websocket.close(code=code)


async def _forward(websocket: WebSocket, message: dict[str, Any]) -> None:
	data = message.get("data")
	if isinstance(data, bytes):
		data = data.decode("utf-8")
	if not isinstance(data, str):
		return
	try:
		await websocket.send_json(json.loads(data))
	except json.JSONDecodeError:
		await websocket.send_text(data)


@router.websocket("/ws/crops/{crop_id}/live")
async def ws_crop_feed(websocket: WebSocket, crop_id: str) -> None:
	await websocket.accept()
	try:
		crop_uuid = uuid.UUID(crop_id)
	except ValueError:
		await _reject(websocket, "invalid_crop_id")
		return

	token = (websocket.query_params.get("token") or "").strip()
	if not token:
		await _reject(websocket, "auth_required")
		return
	owner_id = await _authenticate_token(token)
	if owner_id is None:
		await _reject(websocket, "auth_invalid")
		return

	# Another grower's crop is reported exactly like a missing one.
	if not await _crop_owned_by(crop_uuid, owner_id):
		await _reject(websocket, "crop_not_found")
		return

	redis_client = getattr(websocket.app.state, "redis", None)
	if redis_client is None:
		await _reject(websocket, "redis_unavailable", INTERNAL_ERROR)
		return

	channel = live_channel(crop_uuid)
	pubsub = redis_client.pubsub()
	await pubsub.subscribe(channel)
	receiver = asyncio.create_task(websocket.receive())
	try:
		while True:
			if receiver.done():
				if receiver.result().get("type") == "websocket.disconnect":
					return
				# Client frames are ignored; keep listening for the close.
				receiver = asyncio.create_task(websocket.receive())
			message = await pubsub.get_message(ignore_subscribe_messages=True, timeout=1.0)
			if message is not None and message.get("type") == "message":
				await _forward(websocket, message)
			await asyncio.sleep(0.05)
	except WebSocketDisconnect:
		return
	finally:
		receiver.cancel()
		await pubsub.unsubscribe(channel)
		await pubsub.close()
