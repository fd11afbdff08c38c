"""Text-generation collaborator (Ollama)."""

from .ollama_client import (
    OllamaClient,
    OllamaResponse,
    RetryPolicy,
    check_ollama_ready,
    get_ollama_client,
)

__all__ = [
    "OllamaClient",
    "OllamaResponse",
    "RetryPolicy",
    "check_ollama_ready",
    "get_ollama_client",
]
