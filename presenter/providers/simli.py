"""Simli avatar video-session client."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from presenter.core.errors import UpstreamFailure
from presenter.providers.base import AvatarProvider, AvatarSession, upstream_failure


class SimliAvatarProvider(AvatarProvider):
    """Start WebRTC avatar sessions and relay their ICE configuration."""

    name = "simli"

    def __init__(
        self,
        api_key: str | None,
        face_id: str | None,
        *,
        base_url: str = "https://api.simli.ai",
        speak_url: str | None = None,
        max_session_length: int = 3600,
        max_idle_time: int = 600,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self.face_id = face_id
        self.base_url = base_url.rstrip("/")
        self.speak_url = speak_url
        self.max_session_length = max_session_length
        self.max_idle_time = max_idle_time
        self._timeout = timeout
        self._transport = transport
        self._logger = logging.getLogger("presenter.avatar")

    def missing_setting(self) -> str | None:
        if not self._api_key:
            return "simli_api_key"
        if not self.face_id:
            return "simli_face_id"
        return None

    async def start_session(
        self,
        greeting: str | None = None,
        *,
        face_id: str | None = None,
        voice_id: str | None = None,
    ) -> AvatarSession:
        self.ensure_configured()

        payload: dict[str, Any] = {
            "apiKey": self._api_key,
            "faceId": face_id or self.face_id,
            "handleSilence": True,
            "maxSessionLength": self.max_session_length,
            "maxIdleTime": self.max_idle_time,
        }
        if greeting:
            payload["firstMessage"] = greeting
        if voice_id:
            payload["voiceId"] = voice_id

        data = await self._post(f"{self.base_url}/startAudioToVideoSession", payload)
        if not isinstance(data, dict):
            raise UpstreamFailure(self.name, "session response is not an object", upstream_body=data)

        session_id = data.get("session_token") or data.get("sessionId")
        join_url = data.get("roomUrl") or data.get("url")
        if not session_id and not join_url:
            raise UpstreamFailure(self.name, "session response has no token or URL", upstream_body=data)

        self._logger.info("Avatar session started for face %s", payload["faceId"])
        return AvatarSession(session_id=session_id, join_url=join_url, raw=data)

    async def ice_servers(self) -> Any:
        self.ensure_configured()
        return await self._post(f"{self.base_url}/getIceServers", {"apiKey": self._api_key})

    async def deliver(self, session_id: str, text: str) -> dict[str, Any] | None:
        if not self.speak_url:
            return None
        self.ensure_configured()

        data = await self._post(
            self.speak_url,
            {"apiKey": self._api_key, "session_token": session_id, "text": text},
        )
        return data if isinstance(data, dict) else {"response": data}

    def public_config(self) -> dict[str, Any]:
        self.ensure_configured()
        return {"apiKey": self._api_key, "faceID": self.face_id}

    async def _post(self, url: str, payload: dict[str, Any]) -> Any:
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(url, json=payload)
                response.raise_for_status()
        except httpx.HTTPError as exc:
            raise upstream_failure(self.name, exc) from exc

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            raise UpstreamFailure(self.name, "response is not JSON", upstream_body=response.text) from None
