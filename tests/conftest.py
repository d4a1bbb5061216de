from __future__ import annotations

import json
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Callable, Mapping, Sequence

import pytest

from presenter.providers.base import (
    AvatarProvider,
    AvatarSession,
    KnowledgeRetriever,
    LanguageModel,
    SpeechSynthesizer,
)


class FakeLanguageModel(LanguageModel):
    name = "fake-llm"

    def __init__(self, reply: str | Callable[[list[dict[str, Any]]], str] = "Welcome everyone!") -> None:
        self.reply = reply
        self.error: Exception | None = None
        self.calls: list[dict[str, Any]] = []

    def missing_setting(self) -> str | None:
        return None

    async def complete(self, messages: Sequence[Mapping[str, Any]], *, json_mode: bool = False) -> str:
        self.calls.append({"messages": [dict(message) for message in messages], "json_mode": json_mode})
        if self.error is not None:
            raise self.error
        if callable(self.reply):
            return self.reply(self.calls[-1]["messages"])
        return self.reply

    async def embed(self, text: str) -> list[float]:
        return [0.1, 0.2, 0.3]


class FakeSynthesizer(SpeechSynthesizer):
    name = "fake-tts"

    def __init__(self, audio: bytes = b"\x00\x01pcm") -> None:
        self.audio = audio
        self.error: Exception | None = None
        self.texts: list[str] = []
        self.voices: list[str | None] = []

    def missing_setting(self) -> str | None:
        return None

    async def synthesize(self, text: str, *, voice_id: str | None = None) -> bytes:
        self.texts.append(text)
        self.voices.append(voice_id)
        if self.error is not None:
            raise self.error
        return self.audio


class FakeRetriever(KnowledgeRetriever):
    name = "fake-retriever"

    def __init__(self, passages: list[str] | None = None) -> None:
        self.passages = passages or []
        self.queries: list[str] = []

    def missing_setting(self) -> str | None:
        return None

    async def retrieve(self, query: str) -> list[str]:
        self.queries.append(query)
        return list(self.passages)


class FakeAvatar(AvatarProvider):
    name = "fake-avatar"

    def __init__(self) -> None:
        self.start_error: Exception | None = None
        self.deliver_error: Exception | None = None
        self.delivered: list[tuple[str, str]] = []
        self.greetings: list[str | None] = []

    def missing_setting(self) -> str | None:
        return None

    async def start_session(
        self,
        greeting: str | None = None,
        *,
        face_id: str | None = None,
        voice_id: str | None = None,
    ) -> AvatarSession:
        self.greetings.append(greeting)
        if self.start_error is not None:
            raise self.start_error
        return AvatarSession(
            session_id="tok-123",
            join_url="https://avatar.example/room/123",
            raw={"session_token": "tok-123"},
        )

    async def ice_servers(self) -> Any:
        return [{"urls": ["stun:stun.example:3478"]}]

    async def deliver(self, session_id: str, text: str) -> dict[str, Any] | None:
        if self.deliver_error is not None:
            raise self.deliver_error
        self.delivered.append((session_id, text))
        return {"status": "queued"}

    def public_config(self) -> dict[str, Any]:
        return {"apiKey": "simli-key", "faceID": "face-1"}


@pytest.fixture(scope="session")
def fixtures_dir() -> Path:
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def present_payload(fixtures_dir: Path) -> dict:
    return json.loads((fixtures_dir / "present_middle_slide.json").read_text(encoding="utf-8"))


@pytest.fixture
def answer_payload(fixtures_dir: Path) -> dict:
    return json.loads((fixtures_dir / "answer_question.json").read_text(encoding="utf-8"))


@pytest.fixture
def fakes() -> SimpleNamespace:
    return SimpleNamespace(
        llm=FakeLanguageModel(),
        tts=FakeSynthesizer(),
        retriever=FakeRetriever(["Enterprise plan costs $99 per seat.", "Annual billing saves 20%."]),
        avatar=FakeAvatar(),
    )
