"""ElevenLabs text-to-speech client."""

from __future__ import annotations

import logging

import httpx

from presenter.core.errors import UpstreamFailure
from presenter.providers.base import SpeechSynthesizer, upstream_failure


class ElevenLabsSynthesizer(SpeechSynthesizer):
    """Convert final script text to raw PCM audio."""

    name = "elevenlabs"

    def __init__(
        self,
        api_key: str | None,
        voice_id: str,
        *,
        base_url: str = "https://api.elevenlabs.io/v1",
        model_id: str = "eleven_turbo_v2",
        output_format: str = "pcm_16000",
        stability: float = 0.4,
        similarity_boost: float = 0.8,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self.voice_id = voice_id
        self.base_url = base_url.rstrip("/")
        self.model_id = model_id
        self.output_format = output_format
        self.stability = stability
        self.similarity_boost = similarity_boost
        self._timeout = timeout
        self._transport = transport
        self._logger = logging.getLogger("presenter.tts")

    def missing_setting(self) -> str | None:
        if not self._api_key:
            return "elevenlabs_api_key"
        if not self.voice_id:
            return "elevenlabs_voice_id"
        return None

    async def synthesize(self, text: str, *, voice_id: str | None = None) -> bytes:
        self.ensure_configured()

        voice = voice_id or self.voice_id
        payload = {
            "text": text,
            "model_id": self.model_id,
            # Lower stability gives the voice more emotional range.
            "voice_settings": {"stability": self.stability, "similarity_boost": self.similarity_boost},
        }
        headers = {"xi-api-key": str(self._api_key), "Content-Type": "application/json"}

        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(
                    f"{self.base_url}/text-to-speech/{voice}",
                    params={"output_format": self.output_format},
                    headers=headers,
                    json=payload,
                )
                response.raise_for_status()
        except httpx.HTTPError as exc:
            raise upstream_failure(self.name, exc) from exc

        audio = response.content
        if not audio:
            raise UpstreamFailure(self.name, "synthesizer returned no audio")

        self._logger.debug("Synthesized %d bytes for %d characters", len(audio), len(text))
        return audio
