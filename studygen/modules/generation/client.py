"""HTTP client issuing one generation request to one model configuration.

The client never retries; moving on to another candidate is the
orchestrator's job. Every failure is raised as an ``EndpointError``.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol

import httpx

from studygen.core.logging import get_logger
from studygen.modules.generation.errors import (
    EmptyBody,
    MissingCredentials,
    TransportError,
    UpstreamStatusError,
)
from studygen.modules.generation.models import (
    GenerationRequest,
    ModelConfig,
    Provider,
    RawModelResponse,
)

logger = get_logger(__name__)

GOOGLE_BASE_URL = "https://generativelanguage.googleapis.com"
OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"


class EndpointClient(Protocol):
    async def call(
        self, config: ModelConfig, request: GenerationRequest, timeout: float
    ) -> RawModelResponse: ...


class HttpEndpointClient:
    """Talks to Gemini's REST API or an OpenAI-compatible router.

    The ``httpx.AsyncClient`` is owned by the caller (the API lifespan in
    production, a ``MockTransport`` client in tests).
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        *,
        gemini_api_key: Optional[str] = None,
        openrouter_api_key: Optional[str] = None,
        google_base_url: str = GOOGLE_BASE_URL,
        openrouter_base_url: str = OPENROUTER_BASE_URL,
    ) -> None:
        self.http = http
        self.gemini_api_key = gemini_api_key
        self.openrouter_api_key = openrouter_api_key
        self.google_base_url = google_base_url.rstrip("/")
        self.openrouter_base_url = openrouter_base_url.rstrip("/")

    async def call(
        self, config: ModelConfig, request: GenerationRequest, timeout: float
    ) -> RawModelResponse:
        if timeout <= 0:
            raise ValueError("timeout must be positive")
        prompt = request.render()

        if config.provider is Provider.OPENROUTER:
            send = self._openrouter_request(config, prompt, timeout)
            extract = _openrouter_text
        else:
            send = self._google_request(config, prompt, timeout)
            extract = _google_text

        logger.debug("Calling %s (timeout=%ss)", config.label, timeout)
        try:
            response = await self.http.send(send)
        except httpx.TimeoutException as e:
            raise TransportError(f"timed out after {timeout}s: {e}", config=config) from e
        except httpx.HTTPError as e:
            raise TransportError(f"transport failure: {e}", config=config) from e

        if not response.is_success:
            raise UpstreamStatusError(response.status_code, response.text, config=config)

        try:
            payload = response.json()
        except ValueError as e:
            raise EmptyBody("response envelope is not JSON", config=config) from e

        text = extract(payload)
        if not text or not text.strip():
            raise EmptyBody("response carried no generated text", config=config)
        return RawModelResponse(text=text, config=config)

    def _google_request(
        self, config: ModelConfig, prompt: str, timeout: float
    ) -> httpx.Request:
        if not self.gemini_api_key:
            raise MissingCredentials("GEMINI_API_KEY is not set", config=config)
        url = (
            f"{self.google_base_url}/{config.api_version}/models/"
            f"{config.name}:generateContent"
        )
        body = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {"responseMimeType": "application/json"},
        }
        return self.http.build_request(
            "POST",
            url,
            params={"key": self.gemini_api_key},
            json=body,
            timeout=timeout,
        )

    def _openrouter_request(
        self, config: ModelConfig, prompt: str, timeout: float
    ) -> httpx.Request:
        if not self.openrouter_api_key:
            raise MissingCredentials("OPENROUTER_API_KEY is not set", config=config)
        body = {
            "model": config.name,
            "messages": [{"role": "user", "content": prompt}],
            "response_format": {"type": "json_object"},
        }
        return self.http.build_request(
            "POST",
            f"{self.openrouter_base_url}/chat/completions",
            headers={"Authorization": f"Bearer {self.openrouter_api_key}"},
            json=body,
            timeout=timeout,
        )


def _google_text(payload: Any) -> str:
    try:
        parts = payload["candidates"][0]["content"]["parts"]
    except (KeyError, IndexError, TypeError):
        return ""
    if not isinstance(parts, list):
        return ""
    return "".join(
        p["text"] for p in parts if isinstance(p, dict) and isinstance(p.get("text"), str)
    )


def _openrouter_text(payload: Any) -> str:
    try:
        content = payload["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return ""
    return content if isinstance(content, str) else ""
