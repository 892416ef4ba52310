"""Completion model clients for the JSON translator.

Each model is a thin, asynchronous wrapper around one chat-completion HTTP
endpoint.  They are the only place in the package that makes a network
call.

Cancellation
------------
The clients use ``httpx.AsyncClient``.  Cancelling the task that awaits
``complete()`` aborts the HTTP request in flight.

Retry policy
------------
Rate limiting (429) and transient server errors (500, 502, 503, 504) are
retried with ``tenacity`` up to ``max_retry_attempts`` times, sleeping
``retry_pause_seconds`` between attempts.  A timeout is retried the same
way.  Anything else (connection refused, 401, malformed JSON, an empty
completion) raises ``ModelError`` immediately.  The translator turns a
``ModelError`` into a ``failure.api_error`` result.

Supported back ends
-------------------
OpenAIChatModel       ``{endpoint}/chat/completions`` with bearer auth.
AzureOpenAIChatModel  full deployment URL with an ``api-key`` header.
OllamaChatModel       ``{base_url}/api/chat`` with ``stream: false``.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Protocol

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_fixed,
)

from sentiment_console.config import ConfigurationError, ModelSettings

logger = logging.getLogger(__name__)

# HTTP statuses worth retrying.
_RETRYABLE_STATUS = frozenset({429, 500, 502, 503, 504})

# Conservative token ceiling; a sentiment object is a handful of tokens.
_DEFAULT_MAX_TOKENS = 256

ChatMessage = dict[str, str]


class ModelError(Exception):
    """The completion service did not produce a usable answer."""


class _TransientStatus(Exception):
    """A retryable HTTP status; carries the response for the final attempt."""

    def __init__(self, response: httpx.Response) -> None:
        super().__init__(f"HTTP {response.status_code}")
        self.response = response


def _is_transient(exc: BaseException) -> bool:
    return isinstance(exc, (httpx.TimeoutException, _TransientStatus))


class CompletionModel(Protocol):
    """What the translator needs from a completion back end."""

    async def complete(self, messages: list[ChatMessage]) -> str: ...

    async def aclose(self) -> None: ...


class _ChatModel(ABC):
    """Shared request/retry machinery for the concrete chat models.

    Subclasses provide the URL, headers, payload and response parsing.

    Attributes:
        _url:                 Full POST URL.
        _timeout:             Per-request timeout in seconds.
        _max_retry_attempts:  Retries after the first attempt.
        _retry_pause:         Seconds to sleep between attempts.
        _client:              Shared ``httpx.AsyncClient``.
        _owns_client:         Whether ``aclose()`` should close ``_client``.
    """

    def __init__(
        self,
        *,
        url: str,
        model: str,
        timeout_seconds: float,
        temperature: float = 0.0,
        max_retry_attempts: int = 3,
        retry_pause_seconds: float = 1.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._url = url
        self._model = model
        self._timeout = timeout_seconds
        self._temperature = temperature
        self._max_retry_attempts = max(0, max_retry_attempts)
        self._retry_pause = max(0.0, retry_pause_seconds)
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout_seconds)

    @property
    def url(self) -> str:
        return self._url

    async def __aenter__(self) -> _ChatModel:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client if this model created it."""
        if self._owns_client:
            await self._client.aclose()

    # ── Primary completion method ─────────────────────────────────────────────

    async def complete(self, messages: list[ChatMessage]) -> str:
        """POST the conversation and return the assistant's reply text.

        Args:
            messages: Chat messages, each ``{"role": ..., "content": ...}``.

        Returns:
            Stripped, non-empty completion text.

        Raises:
            ModelError: On any non-retryable failure, or when retries are
                        exhausted.
        """
        payload = self._build_payload(messages)
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._max_retry_attempts + 1),
            wait=wait_fixed(self._retry_pause),
            retry=retry_if_exception(_is_transient),
            before_sleep=self._log_retry,
            reraise=True,
        )
        try:
            response = await retrying(self._post, payload)
        except _TransientStatus as exc:
            response = exc.response
        except httpx.TimeoutException as exc:
            logger.warning(
                "%s: request timed out after %.1fs (url=%s)",
                type(self).__name__,
                self._timeout,
                self._url,
            )
            raise ModelError(f"Request timed out after {self._timeout:.1f}s") from exc
        except httpx.HTTPError as exc:
            logger.warning("%s: cannot reach %s: %s", type(self).__name__, self._url, exc)
            raise ModelError(f"Cannot reach completion service at {self._url}") from exc

        return self._read_response(response)

    # ── Internal helpers ──────────────────────────────────────────────────────

    async def _post(self, payload: dict) -> httpx.Response:
        response = await self._client.post(
            self._url,
            json=payload,
            headers=self._headers(),
            timeout=self._timeout,
        )
        if response.status_code in _RETRYABLE_STATUS:
            raise _TransientStatus(response)
        return response

    def _log_retry(self, retry_state: RetryCallState) -> None:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        reason = "timeout" if isinstance(exc, httpx.TimeoutException) else str(exc)
        logger.info(
            "%s: %s, retrying (%d/%d) in %.1fs",
            type(self).__name__,
            reason,
            retry_state.attempt_number,
            self._max_retry_attempts,
            self._retry_pause,
        )

    def _read_response(self, response: httpx.Response) -> str:
        if response.is_error:
            logger.warning(
                "%s: HTTP %d from %s: %s",
                type(self).__name__,
                response.status_code,
                self._url,
                response.text[:200],
            )
            raise ModelError(f"Completion service returned HTTP {response.status_code}")
        try:
            data = response.json()
        except ValueError as exc:
            raise ModelError("Completion service returned a non-JSON response") from exc

        content = self._extract_content(data)
        if not content or not content.strip():
            raise ModelError("Completion service returned an empty response")
        return content.strip()

    def _headers(self) -> dict[str, str]:
        return {}

    @abstractmethod
    def _build_payload(self, messages: list[ChatMessage]) -> dict: ...

    @abstractmethod
    def _extract_content(self, data: Any) -> str | None: ...


class OpenAIChatModel(_ChatModel):
    """OpenAI-compatible ``/chat/completions`` client."""

    def __init__(
        self,
        *,
        api_key: str,
        endpoint: str,
        model: str,
        organization: str = "",
        **kwargs: Any,
    ) -> None:
        super().__init__(url=f"{endpoint.rstrip('/')}/chat/completions", model=model, **kwargs)
        self._api_key = api_key
        self._organization = organization

    def _headers(self) -> dict[str, str]:
        headers = {"Authorization": f"Bearer {self._api_key}"}
        if self._organization:
            headers["OpenAI-Organization"] = self._organization
        return headers

    def _build_payload(self, messages: list[ChatMessage]) -> dict:
        return {
            "model": self._model,
            "messages": messages,
            "temperature": self._temperature,
            "n": 1,
            "max_tokens": _DEFAULT_MAX_TOKENS,
        }

    def _extract_content(self, data: Any) -> str | None:
        try:
            return data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            return None


class AzureOpenAIChatModel(OpenAIChatModel):
    """Azure OpenAI deployment client.

    ``endpoint`` is the full deployment URL including ``api-version``, so no
    path is appended and no ``model`` field is sent.
    """

    def __init__(self, *, api_key: str, endpoint: str, model: str, **kwargs: Any) -> None:
        kwargs.pop("organization", None)
        _ChatModel.__init__(self, url=endpoint, model=model, **kwargs)
        self._api_key = api_key
        self._organization = ""

    def _headers(self) -> dict[str, str]:
        return {"api-key": self._api_key}

    def _build_payload(self, messages: list[ChatMessage]) -> dict:
        payload = super()._build_payload(messages)
        payload.pop("model")
        return payload


class OllamaChatModel(_ChatModel):
    """Local Ollama ``/api/chat`` client.

    ``stream`` is always ``False`` so the reply arrives as a single JSON
    object, and ``format`` is ``"json"`` so the model is constrained
    to emit a JSON document.
    """

    def __init__(self, *, base_url: str, model: str, **kwargs: Any) -> None:
        super().__init__(url=f"{base_url.rstrip('/')}/api/chat", model=model, **kwargs)

    def _build_payload(self, messages: list[ChatMessage]) -> dict:
        return {
            "model": self._model,
            "stream": False,
            "format": "json",
            "messages": messages,
            "options": {
                "temperature": self._temperature,
                "num_predict": _DEFAULT_MAX_TOKENS,
            },
        }

    def _extract_content(self, data: Any) -> str | None:
        if not isinstance(data, dict):
            return None
        return (data.get("message") or {}).get("content")


def create_model(settings: ModelSettings, *, client: httpx.AsyncClient | None = None) -> _ChatModel:
    """Build the completion model described by ``settings``.

    Args:
        settings: Model section of the loaded configuration.
        client:   Optional shared HTTP client (tests inject one).

    Returns:
        A ready-to-use chat model.

    Raises:
        ConfigurationError: If ``settings`` fail validation.
    """
    settings.validate()
    common: dict[str, Any] = {
        "timeout_seconds": settings.timeout_seconds,
        "temperature": settings.temperature,
        "max_retry_attempts": settings.max_retry_attempts,
        "retry_pause_seconds": settings.retry_pause_seconds,
        "client": client,
    }
    if settings.provider == "openai":
        return OpenAIChatModel(
            api_key=settings.api_key,
            endpoint=settings.resolved_endpoint,
            model=settings.model,
            organization=settings.organization,
            **common,
        )
    if settings.provider == "azure":
        return AzureOpenAIChatModel(
            api_key=settings.api_key,
            endpoint=settings.endpoint,
            model=settings.model,
            **common,
        )
    if settings.provider == "ollama":
        return OllamaChatModel(base_url=settings.resolved_endpoint, model=settings.model, **common)
    # validate() already rejects unknown providers.
    raise ConfigurationError(f"Unknown provider {settings.provider!r}")
