"""Input sources for the request loop.

Every source has one method, ``next()``, returning the next line of text
or ``None`` once the stream has ended.  ``None`` is the normal end of a
session, not an error.

``next()`` blocks the calling thread while it waits for input.  That is
fine here: the loop never has a request in flight while it is reading.
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path
from typing import Protocol, TextIO

# Typing one of these on its own line ends an interactive session.
STOP_WORDS = frozenset({"quit", "exit"})

# Batch-file lines starting with this are skipped.
COMMENT_PREFIX = "#"


class InputSource(Protocol):
    def next(self) -> str | None: ...


class SingleLineSource:
    """Yields one pre-supplied line, then ends.  Never prompts."""

    def __init__(self, text: str) -> None:
        self._text = text
        self._consumed = False

    def next(self) -> str | None:
        if self._consumed:
            return None
        self._consumed = True
        return self._text


class InteractiveSource:
    """Prompts on the terminal before each read.

    Blank lines are read past; ``quit``/``exit`` and end-of-file end the
    stream.  ``KeyboardInterrupt`` is left to propagate so the caller can
    treat it as a cancellation.

    Attributes:
        prompt:  Text written before every read.
        _reader: ``input``-compatible callable (swapped out in tests).
    """

    def __init__(self, prompt: str, *, reader: Callable[[str], str] = input) -> None:
        self.prompt = prompt
        self._reader = reader

    def next(self) -> str | None:
        while True:
            try:
                line = self._reader(self.prompt)
            except EOFError:
                return None
            text = line.strip()
            if not text:
                continue
            if text.lower() in STOP_WORDS:
                return None
            return text


class FileSource:
    """Replays the lines of a UTF-8 text file as if they had been typed.

    Each yielded line is echoed after the prompt so that the output reads
    like an interactive transcript.  Blank lines and ``#`` comments are
    skipped.

    Raises:
        OSError: From the constructor, if the file cannot be read.
    """

    def __init__(self, path: Path | str, *, prompt: str = "", echo: TextIO | None = None) -> None:
        self.path = Path(path)
        self.prompt = prompt
        self._echo = echo
        self._lines = iter(self.path.read_text(encoding="utf-8").splitlines())

    def next(self) -> str | None:
        for line in self._lines:
            text = line.strip()
            if not text or text.startswith(COMMENT_PREFIX):
                continue
            print(f"{self.prompt}{text}", file=self._echo or sys.stdout, flush=True)
            return text
        return None
