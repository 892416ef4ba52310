"""Interactive console: input sources, the request loop and output rendering."""

from sentiment_console.console.app import ConsoleApp
from sentiment_console.console.cancellation import CancellationToken, cancel_on_interrupt
from sentiment_console.console.input_source import (
    FileSource,
    InputSource,
    InteractiveSource,
    SingleLineSource,
)
from sentiment_console.console.output import ResponseRenderer, describe_sentiment

__all__ = [
    "CancellationToken",
    "ConsoleApp",
    "FileSource",
    "InputSource",
    "InteractiveSource",
    "ResponseRenderer",
    "SingleLineSource",
    "cancel_on_interrupt",
    "describe_sentiment",
]
