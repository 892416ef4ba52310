"""Natural-language → JSON translator.

``JsonTranslator`` is the collaborator the request loop talks to.  It
orchestrates the prompt builders, a ``CompletionModel`` and the
``JsonValidator`` to turn one line of user text into a validated instance of
the target schema.

Caller contract
---------------
``translate()`` always returns a ``TranslationResult``:

- ``success`` with the validated pydantic value, or
- ``failure.api_error`` when the completion service could not answer, or
- ``failure.validation_failed`` when the answer still did not match the
  schema after the allowed repair attempts.

It does not catch ``asyncio.CancelledError``: cancelling the awaiting task
aborts the in-flight HTTP call and the cancellation propagates to the
caller.

Repair loop
-----------
When the first answer fails validation and ``max_repair_attempts`` is not
exhausted, the model's answer is appended to the conversation as an
``assistant`` message, followed by a repair prompt quoting the validator's
error, and the model is asked again.
"""

from __future__ import annotations

import logging
from typing import Protocol

from pydantic import BaseModel

from sentiment_console.translation.model import ChatMessage, CompletionModel, ModelError
from sentiment_console.translation.prompts import build_repair_prompt, build_request_prompt
from sentiment_console.translation.result import (
    STATUS_API_ERROR,
    STATUS_VALIDATION_FAILED,
    TranslationResult,
)
from sentiment_console.translation.schema import TargetSchema
from sentiment_console.translation.validator import JsonValidator

logger = logging.getLogger(__name__)


class Translator(Protocol):
    """Single-operation interface the request loop depends on."""

    async def translate(self, text: str, schema: TargetSchema) -> TranslationResult: ...


class JsonTranslator:
    """Translates text into schema-conforming JSON via a completion model.

    Attributes:
        _model:               Completion back end.
        _validator:           Parses and checks raw completions.
        _max_repair_attempts: Extra completion calls allowed after an
                              invalid answer.
    """

    def __init__(
        self,
        model: CompletionModel,
        *,
        max_repair_attempts: int = 1,
        validator: JsonValidator | None = None,
    ) -> None:
        self._model = model
        self._validator = validator or JsonValidator()
        self._max_repair_attempts = max(0, max_repair_attempts)

    @property
    def model(self) -> CompletionModel:
        return self._model

    async def aclose(self) -> None:
        """Release the completion model's HTTP resources."""
        await self._model.aclose()

    # ── Public API ────────────────────────────────────────────────────────────

    async def translate(self, text: str, schema: TargetSchema) -> TranslationResult[BaseModel]:
        """Translate ``text`` into an instance of ``schema.model``.

        Args:
            text:   One line of user input.
            schema: Target schema descriptor.

        Returns:
            A ``TranslationResult``; see the module docstring for statuses.
        """
        messages: list[ChatMessage] = [
            {"role": "user", "content": build_request_prompt(text, schema)},
        ]
        attempts = 0
        repairs_left = self._max_repair_attempts

        while True:
            attempts += 1
            try:
                raw = await self._model.complete(messages)
            except ModelError as exc:
                # The model already logged the specific failure reason.
                return TranslationResult.fail(STATUS_API_ERROR, str(exc), attempts=attempts)

            value, error = self._validator.validate(raw, schema)
            if value is not None:
                return TranslationResult.success(value, attempts=attempts)

            if repairs_left <= 0:
                return TranslationResult.fail(
                    STATUS_VALIDATION_FAILED,
                    f"Response did not match {schema.name}: {error}",
                    attempts=attempts,
                )

            repairs_left -= 1
            logger.info(
                "JsonTranslator: attempting repair (%d left) after: %s",
                repairs_left,
                error,
            )
            messages.append({"role": "assistant", "content": raw})
            messages.append({"role": "user", "content": build_repair_prompt(error or "")})
