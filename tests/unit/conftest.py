"""Pytest unit test fixtures."""

import pytest

from presenter.core.metrics import MetricsCollector
from presenter.memory.store import InMemorySessionStore
from presenter.pipeline import PresentationPipeline
from presenter.prompts.assembler import PromptAssembler


@pytest.fixture()
def session_store():
    return InMemorySessionStore(max_turns=6)


@pytest.fixture()
def pipeline(session_store, fakes):
    return PresentationPipeline(
        sessions=session_store,
        assembler=PromptAssembler(),
        llm=fakes.llm,
        synthesizer=fakes.tts,
        avatar=fakes.avatar,
        retriever=fakes.retriever,
        metrics=MetricsCollector(),
    )
