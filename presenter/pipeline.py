"""Request pipeline: retrieval, model call, memory update and speech."""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass, field
from typing import Any

from presenter.core.errors import PresenterError, UpstreamFailure
from presenter.core.metrics import MetricsCollector
from presenter.memory.models import ConversationTurn, Role
from presenter.memory.store import ConversationSession, SessionStore
from presenter.prompts.assembler import PromptAssembler
from presenter.prompts.decisions import parse_next_move, parse_should_ask
from presenter.prompts.types import (
    AnswerRequest,
    DecideNextMoveRequest,
    PresentationRequest,
    PresentRequest,
    RequestKind,
    RequestOptions,
    ShouldAskRequest,
    SpeakTextRequest,
)
from presenter.providers.base import (
    AvatarProvider,
    KnowledgeRetriever,
    LanguageModel,
    SpeechSynthesizer,
)

logger = logging.getLogger("presenter.pipeline")


@dataclass(slots=True)
class PipelineResult:
    """Outcome of one presentation request."""

    kind: RequestKind
    session_id: str | None = None
    text: str | None = None
    audio: bytes | None = None
    decision: dict[str, Any] = field(default_factory=dict)
    avatar: dict[str, Any] | None = None

    def to_payload(self) -> dict[str, Any]:
        if not self.kind.produces_speech:
            return dict(self.decision)

        payload: dict[str, Any] = {
            "text": self.text,
            "audio": base64.b64encode(self.audio).decode("ascii") if self.audio is not None else None,
        }
        if self.kind is not RequestKind.TTS_ONLY:
            payload["avatar"] = self.avatar
        return payload


@dataclass(slots=True)
class StartedSession:
    session_id: str
    avatar: dict[str, Any]

    def to_payload(self) -> dict[str, Any]:
        return {"session_id": self.session_id, "avatar": self.avatar}


class PresentationPipeline:
    """Runs each request kind against the configured collaborators."""

    def __init__(
        self,
        *,
        sessions: SessionStore,
        assembler: PromptAssembler,
        llm: LanguageModel,
        synthesizer: SpeechSynthesizer,
        avatar: AvatarProvider,
        retriever: KnowledgeRetriever | None = None,
        metrics: MetricsCollector | None = None,
    ) -> None:
        self.sessions = sessions
        self.assembler = assembler
        self.llm = llm
        self.synthesizer = synthesizer
        self.avatar = avatar
        self.retriever = retriever
        self.metrics = metrics

    async def handle(self, request: PresentationRequest, options: RequestOptions | None = None) -> PipelineResult:
        options = options or RequestOptions()
        try:
            result = await self._dispatch(request, options)
        except PresenterError as exc:
            self._record(request.kind, exc.error_code)
            if isinstance(exc, UpstreamFailure) and self.metrics is not None:
                self.metrics.record_upstream_failure(exc.provider)
            raise
        self._record(request.kind, "ok")
        return result

    async def _dispatch(self, request: PresentationRequest, options: RequestOptions) -> PipelineResult:
        # Fail on missing credentials before any network call is made.
        if request.kind.uses_model:
            self.llm.ensure_configured()
        wants_audio = request.kind is RequestKind.TTS_ONLY or (request.kind.produces_speech and options.with_audio)
        if wants_audio:
            self.synthesizer.ensure_configured()

        if isinstance(request, SpeakTextRequest):
            audio = await self.synthesizer.synthesize(request.text, voice_id=options.voice_id)
            return PipelineResult(kind=request.kind, session_id=options.session_id, text=request.text, audio=audio)

        if isinstance(request, DecideNextMoveRequest):
            prompt = self.assembler.assemble(request)
            raw = await self.llm.complete(prompt.to_messages(), json_mode=True)
            action = parse_next_move(raw)
            logger.info("Next move for %r classified as %s", request.text[:60], action)
            return PipelineResult(kind=request.kind, session_id=options.session_id, decision={"action": action})

        if isinstance(request, ShouldAskRequest):
            prompt = self.assembler.assemble(request)
            raw = await self.llm.complete(prompt.to_messages(), json_mode=True)
            ask = parse_should_ask(raw)
            logger.info("Pause for questions at slide %d/%d: %s", request.slide_index, request.total_slides, ask)
            return PipelineResult(kind=request.kind, session_id=options.session_id, decision={"ask": ask})

        # Only narration and answers read or write memory; classification and
        # TTS requests ignore the session id.
        session = self.sessions.get(options.session_id)
        if isinstance(request, PresentRequest):
            script = await self._narrate(request, session)
        elif isinstance(request, AnswerRequest):
            script = await self._answer(request, session)
        else:
            raise TypeError(f"Unhandled request type {type(request).__name__}")

        audio = None
        if wants_audio:
            audio = await self.synthesizer.synthesize(script, voice_id=options.voice_id)

        avatar = None
        if options.avatar_session_id:
            avatar = await self._deliver_to_avatar(options.avatar_session_id, script)

        return PipelineResult(
            kind=request.kind,
            session_id=options.session_id,
            text=script,
            audio=audio,
            avatar=avatar,
        )

    async def _narrate(self, request: PresentRequest, session: ConversationSession) -> str:
        prompt = self.assembler.assemble(request)
        script = await self.llm.complete(prompt.to_messages())
        session.append(ConversationTurn(role=Role.ASSISTANT, content=script))
        return script

    async def _answer(self, request: AnswerRequest, session: ConversationSession) -> str:
        knowledge: list[str] = []
        if self.retriever is not None:
            knowledge = await self.retriever.retrieve(request.text)

        prompt = self.assembler.assemble(request, session.snapshot(), knowledge)
        script = await self.llm.complete(prompt.to_messages())
        session.append(ConversationTurn(role=Role.USER, content=request.text))
        session.append(ConversationTurn(role=Role.ASSISTANT, content=script))
        return script

    async def _deliver_to_avatar(self, avatar_session_id: str, script: str) -> dict[str, Any] | None:
        try:
            return await self.avatar.deliver(avatar_session_id, script)
        except PresenterError as exc:
            logger.warning("Avatar delivery failed for session %s: %s", avatar_session_id, exc.message)
            if isinstance(exc, UpstreamFailure) and self.metrics is not None:
                self.metrics.record_upstream_failure(exc.provider)
            return None

    async def start_session(
        self,
        *,
        session_id: str | None = None,
        greeting: str | None = None,
        face_id: str | None = None,
        voice_id: str | None = None,
    ) -> StartedSession:
        """Open an avatar session and give it fresh conversation memory."""

        self.avatar.ensure_configured()

        if session_id:
            self.sessions.start(session_id)
        else:
            session_id = self.sessions.start()
            # Clients that never send a session id share the default session.
            self.sessions.reset(None)

        try:
            descriptor = await self.avatar.start_session(greeting, face_id=face_id, voice_id=voice_id)
        except UpstreamFailure as exc:
            if self.metrics is not None:
                self.metrics.record_upstream_failure(exc.provider)
            raise
        return StartedSession(session_id=session_id, avatar=descriptor.to_payload())

    def _record(self, kind: RequestKind, outcome: str) -> None:
        if self.metrics is not None:
            self.metrics.record_request(kind.value, outcome)
