"""Application settings and configuration helpers."""

from __future__ import annotations

from functools import lru_cache
from typing import List

from pydantic import AnyHttpUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Strongly-typed configuration sourced from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="Slide Presenter", description="Human-readable service name.")
    environment: str = Field(default="local", description="Deployment environment identifier.")
    log_level: str = Field(default="INFO", description="Application log level.")
    host: str = Field(default="0.0.0.0", description="Bind address for the uvicorn launcher.")
    port: int = Field(default=3000, ge=1, le=65535, description="Bind port for the uvicorn launcher.")

    frontend_origin: AnyHttpUrl | None = Field(
        default=None,
        description="Allowed frontend origin (CORS). If omitted, every origin is allowed.",
    )
    additional_origins: List[AnyHttpUrl] = Field(
        default_factory=list,
        description="Additional allowed CORS origins for multi-client deployments.",
    )
    http_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout applied to every outbound provider call.",
    )

    openai_api_key: str | None = Field(default=None, description="OpenAI API key.")
    openai_base_url: str = Field(default="https://api.openai.com/v1", description="OpenAI API base URL.")
    openai_model: str = Field(default="gpt-4o-mini", description="Primary chat model.")
    openai_fallback_models: List[str] = Field(
        default_factory=list,
        description="Chat models tried in order when the primary model call fails.",
    )
    openai_embedding_model: str = Field(
        default="text-embedding-3-small",
        description="Embedding model used for knowledge retrieval.",
    )
    openai_max_tokens: int = Field(default=200, ge=1, description="Completion token cap for narration.")
    openai_temperature: float = Field(default=0.7, ge=0.0, le=2.0, description="Narration sampling temperature.")

    elevenlabs_api_key: str | None = Field(default=None, description="ElevenLabs API key.")
    elevenlabs_base_url: str = Field(default="https://api.elevenlabs.io/v1", description="ElevenLabs API base URL.")
    elevenlabs_voice_id: str = Field(default="21m00Tcm4TlvDq8ikWAM", description="Default TTS voice.")
    elevenlabs_model_id: str = Field(default="eleven_turbo_v2", description="TTS model identifier.")
    elevenlabs_output_format: str = Field(default="pcm_16000", description="Raw audio encoding requested.")
    elevenlabs_stability: float = Field(default=0.4, ge=0.0, le=1.0)
    elevenlabs_similarity_boost: float = Field(default=0.8, ge=0.0, le=1.0)

    simli_api_key: str | None = Field(default=None, description="Simli avatar API key.")
    simli_face_id: str | None = Field(default=None, description="Simli avatar face identifier.")
    simli_base_url: str = Field(default="https://api.simli.ai", description="Simli API base URL.")
    simli_speak_url: str | None = Field(
        default=None,
        description="Optional endpoint receiving narration text for an active avatar session.",
    )
    simli_max_session_length: int = Field(default=3600, ge=1, description="Avatar session length cap (seconds).")
    simli_max_idle_time: int = Field(default=600, ge=1, description="Avatar idle timeout (seconds).")

    pinecone_api_key: str | None = Field(default=None, description="Pinecone API key.")
    pinecone_index: str | None = Field(default=None, description="Pinecone index name.")
    pinecone_index_host: str | None = Field(
        default=None,
        description="Pinecone data-plane host. Resolved from the index name when omitted.",
    )
    pinecone_control_url: str = Field(default="https://api.pinecone.io", description="Pinecone control plane.")
    pinecone_top_k: int = Field(default=2, ge=1, le=50, description="Passages retrieved per question.")

    memory_max_turns: int = Field(default=6, ge=1, description="Conversation turns kept per session.")
    memory_max_sessions: int = Field(
        default=100, ge=1, description="Started sessions held before the least recently used is dropped."
    )
    presenter_name: str = Field(default="Elsa", description="Persona name used in prompts.")
    company_name: str = Field(default="PrimEx", description="Company the presenter speaks for.")
    require_slide_image: bool = Field(
        default=False,
        description="Reject narration requests that do not carry a slide image.",
    )

    @property
    def cors_origins(self) -> list[str]:
        """Return the full list of allowed CORS origins."""

        if not self.frontend_origin and not self.additional_origins:
            return ["*"]

        origins: list[str] = []
        if self.frontend_origin:
            origins.append(str(self.frontend_origin).rstrip("/"))
        for origin in self.additional_origins:
            origins.append(str(origin).rstrip("/"))

        # Deduplicate while preserving order
        seen: set[str] = set()
        unique: list[str] = []
        for origin in origins:
            if origin not in seen:
                seen.add(origin)
                unique.append(origin)
        return unique

    @property
    def model_candidates(self) -> list[str]:
        """Primary chat model followed by the fallbacks, without repeats."""

        candidates: list[str] = []
        for model in [self.openai_model, *self.openai_fallback_models]:
            if model and model not in candidates:
                candidates.append(model)
        return candidates


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()
