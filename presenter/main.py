"""FastAPI application entry point for the slide presenter backend."""

import logging
from typing import Any

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from presenter.api.agent import create_agent_router
from presenter.api.avatar import create_avatar_router, public_config
from presenter.core.config import get_settings
from presenter.core.errors import (
    PresenterError,
    presenter_error_handler,
    request_validation_error_handler,
    unhandled_exception_handler,
)
from presenter.core.logging import configure_logging, request_id_middleware
from presenter.core.metrics import MetricsCollector
from presenter.memory.store import InMemorySessionStore
from presenter.pipeline import PresentationPipeline
from presenter.prompts.assembler import PromptAssembler
from presenter.providers import (
    ElevenLabsSynthesizer,
    OpenAIChatModel,
    PineconeRetriever,
    SimliAvatarProvider,
)

settings = get_settings()
logger = logging.getLogger("presenter.app")

session_store = InMemorySessionStore(settings.memory_max_turns, settings.memory_max_sessions)
metrics = MetricsCollector()
language_model = OpenAIChatModel(
    settings.openai_api_key,
    settings.model_candidates,
    base_url=settings.openai_base_url,
    embedding_model=settings.openai_embedding_model,
    max_tokens=settings.openai_max_tokens,
    temperature=settings.openai_temperature,
    timeout=settings.http_timeout_seconds,
)
pipeline = PresentationPipeline(
    sessions=session_store,
    assembler=PromptAssembler(
        presenter_name=settings.presenter_name,
        company_name=settings.company_name,
        require_slide_image=settings.require_slide_image,
    ),
    llm=language_model,
    synthesizer=ElevenLabsSynthesizer(
        settings.elevenlabs_api_key,
        settings.elevenlabs_voice_id,
        base_url=settings.elevenlabs_base_url,
        model_id=settings.elevenlabs_model_id,
        output_format=settings.elevenlabs_output_format,
        stability=settings.elevenlabs_stability,
        similarity_boost=settings.elevenlabs_similarity_boost,
        timeout=settings.http_timeout_seconds,
    ),
    avatar=SimliAvatarProvider(
        settings.simli_api_key,
        settings.simli_face_id,
        base_url=settings.simli_base_url,
        speak_url=settings.simli_speak_url,
        max_session_length=settings.simli_max_session_length,
        max_idle_time=settings.simli_max_idle_time,
        timeout=settings.http_timeout_seconds,
    ),
    retriever=PineconeRetriever(
        settings.pinecone_api_key,
        language_model,
        index_name=settings.pinecone_index,
        index_host=settings.pinecone_index_host,
        control_url=settings.pinecone_control_url,
        top_k=settings.pinecone_top_k,
        timeout=settings.http_timeout_seconds,
    ),
    metrics=metrics,
)

app = FastAPI(title=settings.app_name, version="0.1.0", docs_url="/docs")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_origins != ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)
app.middleware("http")(request_id_middleware)

app.include_router(create_agent_router(pipeline))
app.include_router(create_avatar_router(pipeline))


@app.get("/health", tags=["health"])
async def health_check() -> dict[str, Any]:
    """Return service status and which providers are configured."""

    return {
        "status": "ok",
        "environment": settings.environment,
        "providers": {
            "llm": pipeline.llm.configured,
            "tts": pipeline.synthesizer.configured,
            "avatar": pipeline.avatar.configured,
            "retrieval": pipeline.retriever.configured if pipeline.retriever else False,
        },
    }


@app.get("/simli-config", tags=["avatar"])
async def simli_config_alias() -> dict[str, Any]:
    """Alias of `/avatar/config` kept for browser clients built against the first release."""

    return public_config(pipeline)


@app.on_event("startup")
async def startup_logging() -> None:
    level = configure_logging(settings.log_level)
    logger.info("Logging configured at %s level for %s environment", logging.getLevelName(level), settings.environment)
    logger.info(
        "Providers configured: llm=%s tts=%s avatar=%s retrieval=%s",
        pipeline.llm.configured,
        pipeline.synthesizer.configured,
        pipeline.avatar.configured,
        pipeline.retriever.configured if pipeline.retriever else False,
    )


app.add_exception_handler(PresenterError, presenter_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_error_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)


@app.get("/metrics", tags=["metrics"])
async def metrics_endpoint() -> dict:
    snapshot = metrics.snapshot()
    return {
        "total_requests": snapshot.total_requests,
        "requests_by_kind": snapshot.requests_by_kind,
        "outcomes": snapshot.outcomes,
        "upstream_failures": snapshot.upstream_failures,
    }
