"""Provider package exports."""

from .base import (
    AvatarProvider,
    AvatarSession,
    KnowledgeRetriever,
    LanguageModel,
    SpeechSynthesizer,
)
from .elevenlabs import ElevenLabsSynthesizer
from .openai_chat import OpenAIChatModel
from .pinecone import PineconeRetriever
from .simli import SimliAvatarProvider

__all__ = [
    "AvatarProvider",
    "AvatarSession",
    "KnowledgeRetriever",
    "LanguageModel",
    "SpeechSynthesizer",
    "ElevenLabsSynthesizer",
    "OpenAIChatModel",
    "PineconeRetriever",
    "SimliAvatarProvider",
]
