"""API routes for narration, answers and the two classification calls."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter

from presenter.pipeline import PresentationPipeline
from presenter.prompts.types import RequestKind, parse_kind, parse_options, parse_request


def create_agent_router(pipeline: PresentationPipeline) -> APIRouter:
    router = APIRouter(prefix="/agent", tags=["agent"])

    async def run(kind: RequestKind, payload: dict[str, Any]) -> dict[str, Any]:
        request = parse_request(kind, payload)
        options = parse_options(payload)
        result = await pipeline.handle(request, options)
        return result.to_payload()

    @router.post("/present")
    async def present_endpoint(payload: dict) -> dict:
        """Narrate one slide: `text`, optional `image`, `slideIndex`, `totalSlides`."""

        return await run(RequestKind.PRESENT, payload)

    @router.post("/answer")
    async def answer_endpoint(payload: dict) -> dict:
        """Answer an interrupting question using retrieved knowledge and slide `context`."""

        return await run(RequestKind.ANSWER, payload)

    @router.post("/decide")
    async def decide_endpoint(payload: dict) -> dict:
        """Classify an utterance as a question (`ANSWER`) or a request to continue (`RESUME`)."""

        return await run(RequestKind.DECIDE_NEXT_MOVE, payload)

    @router.post("/should-ask")
    async def should_ask_endpoint(payload: dict) -> dict:
        """Decide whether the presenter should pause for audience questions now."""

        return await run(RequestKind.SHOULD_ASK, payload)

    @router.post("/tts")
    async def tts_endpoint(payload: dict) -> dict:
        """Speak literal `text` without calling the language model."""

        return await run(RequestKind.TTS_ONLY, payload)

    @router.post("/speak")
    async def speak_endpoint(payload: dict) -> dict:
        """Combined endpoint dispatching on the `type` field."""

        return await run(parse_kind(payload.get("type")), payload)

    return router
