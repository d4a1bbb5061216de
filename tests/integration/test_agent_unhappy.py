from presenter.core.errors import UpstreamFailure
from presenter.providers import OpenAIChatModel


def test_missing_text_returns_400(client, wired):
    response = client.post("/agent/answer", json={"context": "slide"})

    assert response.status_code == 400
    assert response.json() == {"error": "bad_request", "message": "text is required"}


def test_unconfigured_model_returns_400(client, monkeypatch):
    from presenter import main

    monkeypatch.setattr(main.pipeline, "llm", OpenAIChatModel(None, ["gpt-4o-mini"]))

    response = client.post("/agent/decide", json={"text": "carry on"})

    assert response.status_code == 400
    payload = response.json()
    assert payload["error"] == "configuration_missing"
    assert "OPENAI_API_KEY" in payload["message"]


def test_model_failure_passes_upstream_body_through(client, wired):
    wired.llm.error = UpstreamFailure(
        "openai",
        "HTTP 429",
        upstream_status=429,
        upstream_body={"error": {"message": "Rate limit reached"}},
    )

    response = client.post("/agent/present", json={"text": "Slide", "slideIndex": 2, "totalSlides": 3})

    assert response.status_code == 502
    payload = response.json()
    assert payload["error"] == "upstream_failure"
    assert payload["provider"] == "openai"
    assert payload["upstream_status"] == 429
    assert payload["upstream_body"] == {"error": {"message": "Rate limit reached"}}
    assert wired.tts.texts == []


def test_speech_failure_returns_error_not_text(client, wired):
    wired.tts.error = UpstreamFailure("elevenlabs", "HTTP 500", upstream_status=500, upstream_body="boom")

    response = client.post("/agent/present", json={"text": "Slide", "slideIndex": 2, "totalSlides": 3})

    assert response.status_code == 502
    assert "text" not in response.json()


def test_avatar_sidecar_failure_still_returns_text(client, wired):
    wired.avatar.deliver_error = UpstreamFailure("simli", "HTTP 500", upstream_status=500)
    wired.llm.reply = "Great question."

    response = client.post(
        "/agent/answer",
        json={"text": "Why?", "context": "slide", "avatarSessionId": "tok-1"},
    )

    assert response.status_code == 200
    assert response.json()["text"] == "Great question."
    assert response.json()["avatar"] is None


def test_unparseable_classification_returns_502(client, wired):
    wired.llm.reply = "They probably want to continue."

    response = client.post("/agent/decide", json={"text": "sure"})

    assert response.status_code == 502
    assert response.json()["error"] == "classification_parse_failure"


def test_unexpected_error_returns_generic_500(client, wired):
    wired.llm.error = RuntimeError("socket exploded")

    response = client.post("/agent/present", json={"text": "Slide", "slideIndex": 2, "totalSlides": 3})

    assert response.status_code == 500
    assert response.json() == {
        "error": "internal_error",
        "message": "Something unexpected happened. Please try again later.",
    }


def test_non_object_body_returns_400(client, wired):
    response = client.post("/agent/present", json=[1, 2])

    assert response.status_code == 400
    assert response.json() == {"error": "bad_request", "message": "Request body must be a JSON object"}
    assert wired.llm.calls == []


def test_malformed_json_body_returns_400(client, wired):
    response = client.post(
        "/agent/present",
        content="{not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json() == {"error": "bad_request", "message": "Request body is not valid JSON"}


def test_unknown_session_id_returns_400_and_is_not_registered(client, wired):
    from presenter import main

    before = len(main.session_store)

    response = client.post("/agent/answer", json={"text": "Why?", "context": "", "sessionId": "stray-id"})

    assert response.status_code == 400
    assert response.json()["error"] == "unknown_session"
    assert wired.llm.calls == []
    assert len(main.session_store) == before


def test_classification_session_ids_do_not_accumulate(client, wired):
    from presenter import main

    wired.llm.reply = '{"action": "RESUME"}'
    before = len(main.session_store)

    for index in range(20):
        response = client.post("/agent/decide", json={"text": "go on", "sessionId": f"stray-{index}"})
        assert response.status_code == 200

    assert len(main.session_store) == before
