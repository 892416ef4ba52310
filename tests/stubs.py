"""
Shared test doubles.

Stand-ins for the two seams the code under test talks through: the
``Translator`` protocol (used by the request loop) and the
``CompletionModel`` protocol (used by ``JsonTranslator``).
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable

from sentiment_console.console.cancellation import CancellationToken
from sentiment_console.translation.model import ModelError
from sentiment_console.translation.result import STATUS_API_ERROR, TranslationResult
from sentiment_console.translation.schema import SentimentResponse, TargetSchema

# Deterministic text → sentiment table used across the loop tests.
# ``None`` means the stub reports a failure for that input.
SENTIMENTS: dict[str, str | None] = {
    "I love this!": "positive",
    "This is terrible.": "negative",
    "It is a chair.": "neutral",
    "???": None,
}


class TableTranslator:
    """Deterministic translator driven by a lookup table.

    Unknown inputs and inputs mapped to ``None`` produce a
    ``failure.api_error`` result.  Every call is recorded in ``calls``.
    """

    def __init__(self, table: dict[str, str | None] | None = None) -> None:
        self.table = SENTIMENTS if table is None else table
        self.calls: list[tuple[str, TargetSchema]] = []

    async def translate(self, text: str, schema: TargetSchema) -> TranslationResult:
        self.calls.append((text, schema))
        sentiment = self.table.get(text)
        if sentiment is None:
            return TranslationResult.fail(STATUS_API_ERROR, f"could not classify {text!r}")
        return TranslationResult.success(SentimentResponse(sentiment=sentiment))


class RaisingTranslator(TableTranslator):
    """Raises ``exc`` for inputs listed in ``raise_on``, else behaves like the table."""

    def __init__(self, exc: Exception, raise_on: Iterable[str]) -> None:
        super().__init__()
        self.exc = exc
        self.raise_on = set(raise_on)

    async def translate(self, text: str, schema: TargetSchema) -> TranslationResult:
        if text in self.raise_on:
            self.calls.append((text, schema))
            raise self.exc
        return await super().translate(text, schema)


class CancellingTranslator(TableTranslator):
    """Sets the token during the ``cancel_at``-th call (1-based).

    With ``hang=True`` the cancelling call never resolves on its own, so the
    loop must abort it.  With ``hang=False`` it returns a result anyway,
    which the loop must discard.
    """

    def __init__(self, token: CancellationToken, cancel_at: int, *, hang: bool = True) -> None:
        super().__init__()
        self.token = token
        self.cancel_at = cancel_at
        self.hang = hang
        self.aborted = False

    async def translate(self, text: str, schema: TargetSchema) -> TranslationResult:
        if len(self.calls) + 1 == self.cancel_at:
            self.calls.append((text, schema))
            self.token.cancel()
            if not self.hang:
                return TranslationResult.success(SentimentResponse(sentiment="positive"))
            try:
                await asyncio.Event().wait()
            except asyncio.CancelledError:
                self.aborted = True
                raise
        return await super().translate(text, schema)


class ListSource:
    """Input source replaying a fixed list of lines."""

    def __init__(self, lines: Iterable[str]) -> None:
        self._lines = list(lines)
        self.reads = 0

    def next(self) -> str | None:
        self.reads += 1
        if not self._lines:
            return None
        return self._lines.pop(0)


class ScriptedModel:
    """Completion model returning scripted replies in order.

    A reply that is an ``Exception`` instance is raised instead of
    returned.  ``calls`` holds a copy of the messages sent on each call.
    """

    def __init__(self, replies: Iterable[str | Exception]) -> None:
        self.replies = list(replies)
        self.calls: list[list[dict[str, str]]] = []
        self.closed = False

    async def complete(self, messages: list[dict[str, str]]) -> str:
        self.calls.append([dict(m) for m in messages])
        if not self.replies:
            raise ModelError("no scripted reply left")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply

    async def aclose(self) -> None:
        self.closed = True
