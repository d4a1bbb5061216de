"""Prompt assembly for every request kind."""

from __future__ import annotations

from typing import Any, Sequence

from presenter.core.errors import BadRequest
from presenter.memory.models import ConversationTurn
from presenter.prompts import templates
from presenter.prompts.types import (
    AnswerRequest,
    AssembledPrompt,
    DecideNextMoveRequest,
    PresentationRequest,
    PresentRequest,
    ShouldAskRequest,
    SpeakTextRequest,
)

KNOWLEDGE_SEPARATOR = "\n\n"


def join_knowledge(passages: Sequence[str]) -> str:
    """Concatenate retrieved passages in order, separated by a blank line."""

    return KNOWLEDGE_SEPARATOR.join(passages)


class PromptAssembler:
    """Builds the system instruction and user content sent to the model.

    The assembler holds only persona configuration; every call is a pure
    function of the request, the conversation snapshot and the retrieved
    knowledge.
    """

    def __init__(
        self,
        *,
        presenter_name: str = "Elsa",
        company_name: str = "PrimEx",
        require_slide_image: bool = False,
    ) -> None:
        self.presenter_name = presenter_name
        self.company_name = company_name
        self.require_slide_image = require_slide_image

    def assemble(
        self,
        request: PresentationRequest,
        history: Sequence[ConversationTurn] = (),
        knowledge: Sequence[str] = (),
    ) -> AssembledPrompt:
        if isinstance(request, PresentRequest):
            return self._present(request)
        if isinstance(request, AnswerRequest):
            return self._answer(request, history, knowledge)
        if isinstance(request, DecideNextMoveRequest):
            return self._decide_next_move(request)
        if isinstance(request, ShouldAskRequest):
            return self._should_ask(request)
        if isinstance(request, SpeakTextRequest):
            raise BadRequest("TTS_ONLY requests are spoken verbatim and have no prompt")
        raise BadRequest(f"Unsupported request type '{getattr(request, 'kind', request)}'")

    def style_for(self, slide_index: int, total_slides: int) -> str:
        """Return the framing instruction for a slide position."""

        if slide_index == 1:
            return templates.OPENING_STYLE.format(presenter=self.presenter_name, company=self.company_name)
        if slide_index == total_slides:
            return templates.CLOSING_STYLE
        return templates.TRANSITION_STYLE.format(slide_index=slide_index, total_slides=total_slides)

    def _present(self, request: PresentRequest) -> AssembledPrompt:
        if self.require_slide_image and not request.image:
            raise BadRequest("image is required for PRESENT requests")

        system = templates.PRESENT_SYSTEM.format(
            presenter=self.presenter_name,
            company=self.company_name,
            style=self.style_for(request.slide_index, request.total_slides),
        )
        text_part = f'Slide Content: "{request.text}"'

        user_content: str | list[dict[str, Any]]
        if request.image:
            user_content = [
                {"type": "text", "text": text_part},
                {"type": "image_url", "image_url": {"url": request.image}},
            ]
        else:
            user_content = text_part

        return AssembledPrompt(system=system, user_content=user_content)

    def _answer(
        self,
        request: AnswerRequest,
        history: Sequence[ConversationTurn],
        knowledge: Sequence[str],
    ) -> AssembledPrompt:
        system = templates.ANSWER_SYSTEM.format(
            presenter=self.presenter_name,
            knowledge=join_knowledge(knowledge),
            context=request.context,
        )
        return AssembledPrompt(system=system, user_content=request.text, history=list(history))

    def _decide_next_move(self, request: DecideNextMoveRequest) -> AssembledPrompt:
        system = templates.DECIDE_NEXT_MOVE_SYSTEM.format(presenter=self.presenter_name)
        return AssembledPrompt(system=system, user_content=request.text, json_mode=True)

    def _should_ask(self, request: ShouldAskRequest) -> AssembledPrompt:
        system = templates.SHOULD_ASK_SYSTEM.format(presenter=self.presenter_name, company=self.company_name)
        user_content = templates.SHOULD_ASK_USER.format(
            slide_index=request.slide_index,
            total_slides=request.total_slides,
            turns_since_last_prompt=request.turns_since_last_prompt,
            recent_question="yes" if request.recent_question else "no",
            text=request.text,
        )
        return AssembledPrompt(system=system, user_content=user_content, json_mode=True)
