"""Ollama API client for turn generation, decisions and drafting.

Provides a wrapper around the Ollama API with a bounded retry policy for
rate-limited requests. Failures are reported on the response object rather
than raised, so callers decide how each failure surfaces.
"""

import time
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from ..config.settings import get_settings
from ..utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class RetryPolicy:
    """Retry policy applied at the text-generation boundary.

    Only HTTP 429 responses are retried; every other failure is returned
    immediately.
    """

    max_retries: int = 3
    backoff_seconds: float = 4.0


@dataclass
class OllamaResponse:
    """Response from Ollama API."""

    text: str
    model: str
    total_duration_ms: float = 0.0
    prompt_tokens: int = 0
    response_tokens: int = 0
    success: bool = True
    error: Optional[str] = None
    rate_limited: bool = False


def _completed(text: str, data: dict[str, Any], model: str) -> OllamaResponse:
    """Successful response with the timing and token counts Ollama reports."""
    return OllamaResponse(
        text=text.strip(),
        model=model,
        total_duration_ms=data.get("total_duration", 0) / 1_000_000,
        prompt_tokens=data.get("prompt_eval_count", 0),
        response_tokens=data.get("eval_count", 0),
    )


class OllamaClient:
    """Client for interacting with Ollama API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[int] = None,
        retry_policy: Optional[RetryPolicy] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize Ollama client.

        Args:
            base_url: Ollama API URL (default from settings)
            model: Model to use (default from settings)
            timeout: Request timeout in seconds (default from settings)
            retry_policy: Retry policy for rate-limited requests
            transport: Optional httpx transport (used by tests)
        """
        settings = get_settings()

        self.base_url = base_url or settings.ollama.base_url
        self.model = model or settings.ollama.model
        self.timeout = timeout or settings.ollama.timeout
        self.max_tokens = settings.ollama.max_tokens
        self.retry_policy = retry_policy or RetryPolicy(
            max_retries=settings.ollama.max_retries,
            backoff_seconds=settings.ollama.retry_backoff,
        )

        self._client = httpx.Client(timeout=self.timeout, transport=transport)

    def is_available(self) -> bool:
        """Check if Ollama is running and accessible."""
        try:
            response = self._client.get(f"{self.base_url}/api/version")
            return response.status_code == 200
        except httpx.HTTPError:
            return False

    def list_models(self) -> list[str]:
        """List available models."""
        try:
            response = self._client.get(f"{self.base_url}/api/tags")
            if response.status_code == 200:
                data = response.json()
                return [m["name"] for m in data.get("models", [])]
        except httpx.HTTPError:
            pass
        return []

    def _post(self, path: str, payload: dict[str, Any], model: str) -> tuple[Optional[dict], OllamaResponse]:
        """
        POST to the API, retrying rate-limited requests.

        Returns:
            Tuple of (decoded JSON body or None, failure response if any)
        """
        attempt = 0
        while True:
            try:
                response = self._client.post(
                    f"{self.base_url}{path}",
                    json=payload,
                    timeout=self.timeout,
                )
            except httpx.TimeoutException:
                return None, OllamaResponse(
                    text="",
                    model=model,
                    success=False,
                    error="Request timed out. Ollama may be overloaded.",
                )
            except httpx.HTTPError as e:
                return None, OllamaResponse(text="", model=model, success=False, error=str(e))

            if response.status_code == 429:
                if attempt < self.retry_policy.max_retries:
                    attempt += 1
                    logger.warning(
                        f"Rate limited by Ollama, retry {attempt}/{self.retry_policy.max_retries} "
                        f"in {self.retry_policy.backoff_seconds:.1f}s"
                    )
                    time.sleep(self.retry_policy.backoff_seconds)
                    continue
                return None, OllamaResponse(
                    text="",
                    model=model,
                    success=False,
                    rate_limited=True,
                    error=f"HTTP 429 after {attempt} retries",
                )

            if response.status_code != 200:
                return None, OllamaResponse(
                    text="",
                    model=model,
                    success=False,
                    error=f"HTTP {response.status_code}: {response.text[:200]}",
                )

            try:
                return response.json(), None
            except ValueError as e:
                return None, OllamaResponse(
                    text="",
                    model=model,
                    success=False,
                    error=f"Invalid JSON from Ollama: {e}",
                )

    def generate(
        self,
        prompt: str,
        system: Optional[str] = None,
        model: Optional[str] = None,
        temperature: float = 0.3,
        max_tokens: Optional[int] = None,
        format: Optional[Any] = None,
    ) -> OllamaResponse:
        """
        Generate a completion for a single prompt.

        Args:
            prompt: The prompt to send
            system: Optional system prompt
            model: Model to use (default: self.model)
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate
            format: Optional "json" or JSON schema for structured output

        Returns:
            OllamaResponse with generated text
        """
        model = model or self.model

        payload = {
            "model": model,
            "prompt": prompt,
            "stream": False,
            "options": {
                "temperature": temperature,
                "num_predict": max_tokens or self.max_tokens,
            },
        }

        if system:
            payload["system"] = system
        if format is not None:
            payload["format"] = format

        data, failure = self._post("/api/generate", payload, model)
        if failure:
            return failure
        return _completed(data.get("response", ""), data, model)

    def chat(
        self,
        messages: list[dict[str, Any]],
        system: Optional[str] = None,
        model: Optional[str] = None,
        temperature: float = 0.5,
        max_tokens: Optional[int] = None,
    ) -> OllamaResponse:
        """
        Generate the next message of a conversation.

        Args:
            messages: Ordered chat messages ({"role", "content", "images"?})
            system: Optional system instructions
            model: Model to use (default: self.model)
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate

        Returns:
            OllamaResponse with the generated message text
        """
        model = model or self.model

        chat_messages = []
        if system:
            chat_messages.append({"role": "system", "content": system})
        chat_messages.extend(messages)

        payload = {
            "model": model,
            "messages": chat_messages,
            "stream": False,
            "options": {
                "temperature": temperature,
                "num_predict": max_tokens or self.max_tokens,
            },
        }

        data, failure = self._post("/api/chat", payload, model)
        if failure:
            return failure
        return _completed(data.get("message", {}).get("content", ""), data, model)

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()


# Global client instance
_client: Optional[OllamaClient] = None


def get_ollama_client() -> OllamaClient:
    """Get the global Ollama client instance."""
    global _client
    if _client is None:
        _client = OllamaClient()
    return _client


def check_ollama_ready() -> tuple[bool, str]:
    """
    Check if Ollama is ready for the simulation.

    Returns:
        Tuple of (is_ready, message)
    """
    client = get_ollama_client()

    if not client.is_available():
        return False, "Ollama is not running. Start with: ollama serve"

    models = client.list_models()
    settings = get_settings()

    if settings.ollama.model not in models:
        return False, f"Model {settings.ollama.model} not found. Pull with: ollama pull {settings.ollama.model}"

    return True, "Ollama is ready"
