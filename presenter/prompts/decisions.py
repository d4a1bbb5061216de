"""Validated parsing of the model's structured decisions."""

from __future__ import annotations

import json
import re
from typing import Any, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from presenter.core.errors import ClassificationParseFailure
from presenter.prompts.types import NextMove

_FENCE_PATTERN = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL | re.IGNORECASE)
_OBJECT_PATTERN = re.compile(r"\{.*\}", re.DOTALL)


class NextMoveDecision(BaseModel):
    model_config = ConfigDict(extra="ignore")

    action: NextMove

    @field_validator("action", mode="before")
    @classmethod
    def normalise_action(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper()
        return value


class AskDecision(BaseModel):
    model_config = ConfigDict(extra="ignore", strict=True)

    ask: bool


DecisionT = TypeVar("DecisionT", bound=BaseModel)


def parse_next_move(raw_output: str | None) -> Literal["ANSWER", "RESUME"]:
    decision = _parse(raw_output, NextMoveDecision)
    return decision.action.value  # type: ignore[return-value]


def parse_should_ask(raw_output: str | None) -> bool:
    return _parse(raw_output, AskDecision).ask


def _parse(raw_output: str | None, model: type[DecisionT]) -> DecisionT:
    if raw_output is None or not raw_output.strip():
        raise ClassificationParseFailure("Model returned an empty decision", raw_output)

    text = raw_output.strip()
    fenced = _FENCE_PATTERN.match(text)
    if fenced:
        text = fenced.group(1)

    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        # Models occasionally wrap the object in prose.
        match = _OBJECT_PATTERN.search(text)
        if not match:
            raise ClassificationParseFailure("Model decision is not JSON", raw_output) from None
        try:
            data = json.loads(match.group(0))
        except json.JSONDecodeError:
            raise ClassificationParseFailure("Model decision is not JSON", raw_output) from None

    if not isinstance(data, dict):
        raise ClassificationParseFailure("Model decision is not a JSON object", raw_output)

    try:
        return model.model_validate(data)
    except ValidationError as exc:
        fields = ", ".join(str(error["loc"][0]) for error in exc.errors() if error.get("loc"))
        raise ClassificationParseFailure(
            f"Model decision has an unexpected shape ({fields or 'unknown field'})",
            raw_output,
        ) from None
