"""The request loop.

``ConsoleApp`` drives one session: it pulls lines from an input source,
hands each one to the translator together with the target schema, and
renders exactly one outcome per line.

State machine
-------------
Start       read the next line; ``None`` (or Ctrl+C while reading) → Done.
Processing  await ``translator.translate(line, schema)`` raced against the
            cancellation token.
            result first       → Rendering / Reporting
            cancellation first → Done; the translation task is cancelled
                                 and its result, if any, discarded.
Rendering   one line on stdout, back to Start.
Reporting   one line on stderr, back to Start.  A failed line never ends
            the session.
Done        return 0.

Failure discipline
------------------
Whatever the translator does wrong ends up as a ``TranslationFailure``:
a failure result is reported as-is, and an exception raised by the
translator is logged with its traceback and reported as
``failure.unexpected``.  Only cancellation escapes the per-line handling.
"""

from __future__ import annotations

import asyncio
import logging

from sentiment_console.console.cancellation import CancellationToken, cancel_on_interrupt
from sentiment_console.console.input_source import (
    InputSource,
    InteractiveSource,
    SingleLineSource,
)
from sentiment_console.console.output import ResponseRenderer
from sentiment_console.translation.result import STATUS_UNEXPECTED, TranslationResult
from sentiment_console.translation.schema import SENTIMENT_SCHEMA, TargetSchema
from sentiment_console.translation.translator import Translator

logger = logging.getLogger(__name__)


class ConsoleApp:
    """Sequential request loop over a ``Translator``.

    Attributes:
        _translator: Collaborator that turns text into a typed value.
        _schema:     Target schema passed with every request.
        _renderer:   Output sinks for results and failure reports.
        _token:      Cancellation token observed by the loop.
    """

    def __init__(
        self,
        translator: Translator,
        *,
        schema: TargetSchema = SENTIMENT_SCHEMA,
        renderer: ResponseRenderer | None = None,
        token: CancellationToken | None = None,
    ) -> None:
        self._translator = translator
        self._schema = schema
        self._renderer = renderer or ResponseRenderer()
        self._token = token or CancellationToken()

    @property
    def token(self) -> CancellationToken:
        return self._token

    # ── Public API ────────────────────────────────────────────────────────────

    async def run(self, prompt: str, single_input: str | None = None) -> int:
        """Run a session and return the process exit status.

        Args:
            prompt:       Prompt shown before each interactive read.
            single_input: When given, process exactly this line and stop
                          without prompting.

        Returns:
            ``0``; end of input and cancellation are both normal endings.
        """
        source: InputSource
        if single_input is not None:
            source = SingleLineSource(single_input)
        else:
            source = InteractiveSource(prompt)
        return await self.run_source(source)

    async def run_source(self, source: InputSource) -> int:
        """Run the loop over an arbitrary input source."""
        while not self._token.is_cancelled:
            try:
                line = source.next()
            except KeyboardInterrupt:
                self._token.cancel()
                break
            if line is None:
                break

            result = await self.process_request(line)
            if result is None:
                break

            if result.ok:
                self._renderer.render(result.value)
            else:
                self._renderer.report(result.failure)

        if self._token.is_cancelled:
            logger.debug("ConsoleApp: session cancelled")
        return 0

    async def process_request(self, line: str) -> TranslationResult | None:
        """Translate one line, or return ``None`` if cancelled first."""
        task = asyncio.ensure_future(self._translate(line))
        waiter = asyncio.ensure_future(self._token.wait())
        try:
            with cancel_on_interrupt(self._token):
                await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            waiter.cancel()

        # Cancellation wins even when the result arrived in the same tick.
        if self._token.is_cancelled:
            task.cancel()
            await asyncio.wait({task})
            return None
        return task.result()

    # ── Internal helpers ──────────────────────────────────────────────────────

    async def _translate(self, line: str) -> TranslationResult:
        try:
            return await self._translator.translate(line, self._schema)
        except Exception as exc:
            logger.exception("ConsoleApp: translator raised for input %r", line[:60])
            return TranslationResult.fail(STATUS_UNEXPECTED, f"Unexpected error: {exc}")
