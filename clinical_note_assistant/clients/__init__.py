"""
Clients Layer - LLM API Client Abstractions

This layer provides clean abstractions over LLM providers (Gemini, OpenAI),
enabling the rest of the system to work with any provider interchangeably.

Submodules:
    llm_client.py → Protocol and base implementation
    gemini_client.py → Google Gemini implementation
    openai_client.py → OpenAI implementation
"""

from clinical_note_assistant.clients.llm_client import (
    LLMClientProtocol,
    BaseLLMClient,
)
from clinical_note_assistant.clients.gemini_client import GeminiClient
from clinical_note_assistant.clients.openai_client import OpenAIClient

__all__ = [
    "LLMClientProtocol",
    "BaseLLMClient",
    "GeminiClient",
    "OpenAIClient",
]
