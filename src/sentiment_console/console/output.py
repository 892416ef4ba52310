"""Rendering of translation outcomes.

Each processed line produces exactly one line of output: the rendered value
on stdout, or a failure report on stderr.
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from typing import Any, TextIO

from pydantic import BaseModel

from sentiment_console.translation.result import TranslationFailure


def describe_sentiment(value: Any) -> str:
    """``The sentiment is positive``; other models fall back to their JSON."""
    sentiment = getattr(value, "sentiment", None)
    if sentiment is not None:
        return f"The sentiment is {sentiment}"
    if isinstance(value, BaseModel):
        return value.model_dump_json()
    return str(value)


class ResponseRenderer:
    """Writes results and failure reports to the output sinks.

    Streams default to ``sys.stdout``/``sys.stderr`` looked up at write time,
    so redirection (and pytest's ``capsys``) works after construction.
    """

    def __init__(
        self,
        *,
        out: TextIO | None = None,
        err: TextIO | None = None,
        formatter: Callable[[Any], str] = describe_sentiment,
    ) -> None:
        self._out = out
        self._err = err
        self._formatter = formatter

    def render(self, value: Any) -> None:
        print(self._formatter(value), file=self._out or sys.stdout, flush=True)

    def report(self, failure: TranslationFailure) -> None:
        message = "; ".join(part for part in failure.message.splitlines() if part.strip())
        print(f"Error: {message}", file=self._err or sys.stderr, flush=True)
