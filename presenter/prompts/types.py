"""Request kinds, payloads and assembled prompt structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Union

from presenter.core.errors import BadRequest
from presenter.memory.models import ConversationTurn


class RequestKind(str, Enum):
    """Supported presentation request kinds."""

    PRESENT = "PRESENT"
    ANSWER = "ANSWER"
    DECIDE_NEXT_MOVE = "DECIDE_NEXT_MOVE"
    SHOULD_ASK = "SHOULD_ASK"
    TTS_ONLY = "TTS_ONLY"

    @property
    def produces_speech(self) -> bool:
        return self in {RequestKind.PRESENT, RequestKind.ANSWER, RequestKind.TTS_ONLY}

    @property
    def uses_model(self) -> bool:
        return self is not RequestKind.TTS_ONLY


class NextMove(str, Enum):
    """Classification outcome for an utterance made during a presentation."""

    ANSWER = "ANSWER"
    RESUME = "RESUME"


@dataclass(frozen=True, slots=True)
class PresentRequest:
    text: str
    slide_index: int
    total_slides: int
    image: str | None = None
    kind: RequestKind = field(default=RequestKind.PRESENT, init=False)


@dataclass(frozen=True, slots=True)
class AnswerRequest:
    text: str
    context: str = ""
    kind: RequestKind = field(default=RequestKind.ANSWER, init=False)


@dataclass(frozen=True, slots=True)
class DecideNextMoveRequest:
    text: str
    kind: RequestKind = field(default=RequestKind.DECIDE_NEXT_MOVE, init=False)


@dataclass(frozen=True, slots=True)
class ShouldAskRequest:
    slide_index: int
    total_slides: int
    text: str = ""
    turns_since_last_prompt: int = 0
    recent_question: bool = False
    kind: RequestKind = field(default=RequestKind.SHOULD_ASK, init=False)


@dataclass(frozen=True, slots=True)
class SpeakTextRequest:
    text: str
    kind: RequestKind = field(default=RequestKind.TTS_ONLY, init=False)


PresentationRequest = Union[
    PresentRequest,
    AnswerRequest,
    DecideNextMoveRequest,
    ShouldAskRequest,
    SpeakTextRequest,
]


@dataclass(slots=True)
class RequestOptions:
    """Per-request switches that sit beside the presentation payload."""

    session_id: str | None = None
    with_audio: bool = True
    voice_id: str | None = None
    avatar_session_id: str | None = None


@dataclass(slots=True)
class AssembledPrompt:
    """Instruction set sent to the language model."""

    system: str
    user_content: str | list[dict[str, Any]]
    history: list[ConversationTurn] = field(default_factory=list)
    json_mode: bool = False

    def to_messages(self) -> list[dict[str, Any]]:
        messages: list[dict[str, Any]] = [{"role": "system", "content": self.system}]
        messages.extend(turn.as_message() for turn in self.history)
        messages.append({"role": "user", "content": self.user_content})
        return messages


def parse_kind(value: Any) -> RequestKind:
    if not isinstance(value, str) or not value.strip():
        raise BadRequest("type is required")
    try:
        return RequestKind(value.strip().upper())
    except ValueError:
        supported = ", ".join(kind.value for kind in RequestKind)
        raise BadRequest(f"Unsupported request type '{value}'. Expected one of: {supported}") from None


def parse_request(kind: RequestKind, payload: Mapping[str, Any]) -> PresentationRequest:
    """Validate a JSON body into the request variant for ``kind``."""

    if kind is RequestKind.PRESENT:
        slide_index = _required_int(payload, "slideIndex", minimum=1)
        total_slides = _required_int(payload, "totalSlides", minimum=1)
        if slide_index > total_slides:
            raise BadRequest("slideIndex cannot exceed totalSlides")
        text = _optional_str(payload, "text")
        image = _optional_str(payload, "image") or None
        if not text and not image:
            raise BadRequest("text or image is required")
        return PresentRequest(text=text, slide_index=slide_index, total_slides=total_slides, image=image)

    if kind is RequestKind.ANSWER:
        return AnswerRequest(text=_required_str(payload, "text"), context=_optional_str(payload, "context"))

    if kind is RequestKind.DECIDE_NEXT_MOVE:
        return DecideNextMoveRequest(text=_required_str(payload, "text"))

    if kind is RequestKind.SHOULD_ASK:
        slide_index = _required_int(payload, "slideIndex", minimum=1)
        total_slides = _required_int(payload, "totalSlides", minimum=1)
        if slide_index > total_slides:
            raise BadRequest("slideIndex cannot exceed totalSlides")
        turns = payload.get("turnsSinceLastPrompt", 0)
        if turns is None:
            turns = 0
        if isinstance(turns, bool) or not isinstance(turns, int) or turns < 0:
            raise BadRequest("turnsSinceLastPrompt must be a non-negative integer")
        recent = payload.get("recentQuestion", False)
        if not isinstance(recent, bool):
            raise BadRequest("recentQuestion must be a boolean")
        return ShouldAskRequest(
            slide_index=slide_index,
            total_slides=total_slides,
            text=_optional_str(payload, "text"),
            turns_since_last_prompt=turns,
            recent_question=recent,
        )

    if kind is RequestKind.TTS_ONLY:
        return SpeakTextRequest(text=_required_str(payload, "text"))

    raise BadRequest(f"Unsupported request type '{kind}'")


def parse_options(payload: Mapping[str, Any]) -> RequestOptions:
    with_audio = payload.get("withAudio", True)
    if not isinstance(with_audio, bool):
        raise BadRequest("withAudio must be a boolean")
    return RequestOptions(
        session_id=_optional_str(payload, "sessionId") or None,
        with_audio=with_audio,
        voice_id=_optional_str(payload, "voiceId") or None,
        avatar_session_id=_optional_str(payload, "avatarSessionId") or None,
    )


def _required_str(payload: Mapping[str, Any], key: str) -> str:
    value = _optional_str(payload, key)
    if not value:
        raise BadRequest(f"{key} is required")
    return value


def _optional_str(payload: Mapping[str, Any], key: str) -> str:
    value = payload.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise BadRequest(f"{key} must be a string")
    return value.strip()


def _required_int(payload: Mapping[str, Any], key: str, *, minimum: int) -> int:
    value = payload.get(key)
    if value is None:
        raise BadRequest(f"{key} is required")
    if isinstance(value, bool) or not isinstance(value, int):
        raise BadRequest(f"{key} must be an integer")
    if value < minimum:
        raise BadRequest(f"{key} must be at least {minimum}")
    return value
