"""Integration fixtures wiring fake providers into the application pipeline."""

import pytest
from fastapi.testclient import TestClient

from presenter.main import app


@pytest.fixture()
def wired(monkeypatch, fakes):
    from presenter import main

    monkeypatch.setattr(main.pipeline, "llm", fakes.llm)
    monkeypatch.setattr(main.pipeline, "synthesizer", fakes.tts)
    monkeypatch.setattr(main.pipeline, "retriever", fakes.retriever)
    monkeypatch.setattr(main.pipeline, "avatar", fakes.avatar)
    main.session_store.reset(None)
    return fakes


@pytest.fixture()
def client():
    return TestClient(app, raise_server_exceptions=False)
