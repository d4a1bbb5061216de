"""API routes for the avatar video session."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter

from presenter.core.errors import BadRequest
from presenter.pipeline import PresentationPipeline


def create_avatar_router(pipeline: PresentationPipeline) -> APIRouter:
    router = APIRouter(prefix="/avatar", tags=["avatar"])

    @router.post("/session")
    async def start_session_endpoint(payload: dict | None = None) -> dict:
        payload = payload or {}
        started = await pipeline.start_session(
            session_id=_optional(payload, "sessionId"),
            greeting=_optional(payload, "greeting"),
            face_id=_optional(payload, "faceId"),
            voice_id=_optional(payload, "voiceId"),
        )
        return started.to_payload()

    @router.get("/ice-servers")
    async def ice_servers_endpoint() -> Any:
        return await pipeline.avatar.ice_servers()

    @router.get("/config")
    async def config_endpoint() -> dict:
        """Provider identifiers for the browser SDK. Clears the shared memory."""

        return public_config(pipeline)

    return router


def public_config(pipeline: PresentationPipeline) -> dict[str, Any]:
    config = pipeline.avatar.public_config()
    pipeline.sessions.reset(None)
    return config


def _optional(payload: dict[str, Any], key: str) -> str | None:
    value = payload.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise BadRequest(f"{key} must be a string")
    return value.strip() or None
