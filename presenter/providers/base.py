"""Narrow interfaces for the external collaborators."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

import httpx

from presenter.core.errors import ConfigurationMissing, UpstreamFailure

logger = logging.getLogger("presenter.providers")


@dataclass(slots=True)
class AvatarSession:
    """Descriptor returned by the avatar provider for a new video session."""

    session_id: str | None
    join_url: str | None
    raw: dict[str, Any] = field(default_factory=dict)

    def to_payload(self) -> dict[str, Any]:
        return {"session_id": self.session_id, "join_url": self.join_url, "provider": self.raw}


class Provider(ABC):
    """Common configuration check shared by every collaborator."""

    name: str

    @abstractmethod
    def missing_setting(self) -> str | None:
        """Return the first unset required setting, or ``None`` when ready."""

    @property
    def configured(self) -> bool:
        return self.missing_setting() is None

    def ensure_configured(self) -> None:
        missing = self.missing_setting()
        if missing:
            raise ConfigurationMissing(missing, self.name)


class LanguageModel(Provider):
    @abstractmethod
    async def complete(
        self,
        messages: Sequence[Mapping[str, Any]],
        *,
        json_mode: bool = False,
    ) -> str:
        """Return the assistant message content for a chat request."""

    @abstractmethod
    async def embed(self, text: str) -> list[float]:
        """Return the embedding vector for ``text``."""


class SpeechSynthesizer(Provider):
    @abstractmethod
    async def synthesize(self, text: str, *, voice_id: str | None = None) -> bytes:
        """Return raw encoded audio for ``text``."""


class KnowledgeRetriever(Provider):
    @abstractmethod
    async def retrieve(self, query: str) -> list[str]:
        """Return passages relevant to ``query``, best match first."""


class AvatarProvider(Provider):
    @abstractmethod
    async def start_session(
        self,
        greeting: str | None = None,
        *,
        face_id: str | None = None,
        voice_id: str | None = None,
    ) -> AvatarSession:
        """Open a new avatar video session."""

    @abstractmethod
    async def ice_servers(self) -> Any:
        """Return the WebRTC ICE server configuration."""

    @abstractmethod
    async def deliver(self, session_id: str, text: str) -> dict[str, Any] | None:
        """Hand narration text to a running avatar session, if supported."""

    @abstractmethod
    def public_config(self) -> dict[str, Any]:
        """Identifiers the browser SDK needs to join a session."""


def upstream_failure(provider: str, exc: Exception) -> UpstreamFailure:
    """Translate an ``httpx`` error into an :class:`UpstreamFailure`."""

    if isinstance(exc, httpx.HTTPStatusError):
        response = exc.response
        try:
            body: Any = response.json()
        except ValueError:
            body = response.text
        logger.warning("%s returned HTTP %s", provider, response.status_code)
        return UpstreamFailure(
            provider,
            f"HTTP {response.status_code}",
            upstream_status=response.status_code,
            upstream_body=body,
        )
    if isinstance(exc, httpx.TimeoutException):
        logger.warning("%s timed out: %s", provider, exc)
        return UpstreamFailure(provider, "request timed out")
    logger.warning("%s request failed: %s", provider, exc)
    return UpstreamFailure(provider, str(exc) or exc.__class__.__name__)
