"""
Command-line interface for Sentiment Console.

Reads text, asks the configured completion model for its sentiment, and
prints ``The sentiment is <label>`` for each line.

Usage:
    sentiment-console                      # interactive, prompts with 😀>
    sentiment-console "I love this!"       # one line, then exit
    sentiment-console --file reviews.txt   # every line of a file
    sentiment-console --show-config        # print the resolved settings

Environment Variables:
    OPENAI_API_KEY / OPENAI_MODEL / OPENAI_ENDPOINT: OpenAI credentials
    AZURE_OPENAI_API_KEY / AZURE_OPENAI_ENDPOINT: Azure OpenAI deployment
    OLLAMA_BASE_URL / OLLAMA_MODEL: local Ollama server
    SENTIMENT_PROVIDER: openai, azure or ollama
    SENTIMENT_LOG_LEVEL: log level for stderr diagnostics

Exit status:
    0 on end of input or Ctrl+C, including when individual lines failed
    1 when the completion service cannot be configured or the input file
      cannot be read
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Coroutine, Sequence
from typing import Any

from sentiment_console import __version__
from sentiment_console.config import (
    PROVIDERS,
    ConfigurationError,
    ConsoleConfig,
    load_config,
    print_config_summary,
)
from sentiment_console.console.app import ConsoleApp
from sentiment_console.console.input_source import FileSource, InputSource
from sentiment_console.logging_config import configure_logging
from sentiment_console.translation.model import create_model
from sentiment_console.translation.translator import JsonTranslator


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="sentiment-console",
        description="Classify the sentiment of text with a chat-completion model",
    )
    parser.add_argument(
        "text",
        nargs="?",
        help="A single line to classify. Omit to run interactively.",
    )
    parser.add_argument(
        "--file",
        "-f",
        help="Classify every non-blank line of this UTF-8 file.",
    )
    parser.add_argument(
        "--prompt",
        help="Interactive prompt (default: from config, or '😀> ').",
    )
    parser.add_argument(
        "--provider",
        choices=PROVIDERS,
        help="Completion back end (default: SENTIMENT_PROVIDER or openai).",
    )
    parser.add_argument(
        "--model",
        help="Model or deployment name (overrides OPENAI_MODEL / OLLAMA_MODEL).",
    )
    parser.add_argument(
        "--log-level",
        help="Log level for diagnostics on stderr (default: WARNING).",
    )
    parser.add_argument(
        "--config",
        help="INI file to read instead of config/sentiment.ini.",
    )
    parser.add_argument(
        "--show-config",
        action="store_true",
        help="Print the resolved configuration (credentials redacted) and exit.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def apply_overrides(cfg: ConsoleConfig, args: argparse.Namespace) -> None:
    """Apply command-line options on top of the loaded configuration.

    CLI arguments win over environment variables and the config file.
    ``--provider`` is not applied here: it is passed to ``load_config()`` so
    that the matching credential variables are read.
    """
    if getattr(args, "model", None):
        cfg.model.model = args.model
    if getattr(args, "prompt", None) is not None:
        cfg.console.prompt = args.prompt
    if getattr(args, "log_level", None):
        cfg.logging.level = args.log_level.upper()


def build_translator(cfg: ConsoleConfig) -> JsonTranslator:
    """
    Build the translator the request loop will use.

    Raises:
        ConfigurationError: If the model settings are incomplete.
    """
    model = create_model(cfg.model)
    return JsonTranslator(model, max_repair_attempts=cfg.translator.max_repair_attempts)


async def _run_session(
    app: ConsoleApp,
    translator: JsonTranslator,
    *,
    prompt: str,
    single_input: str | None,
    source: InputSource | None,
) -> int:
    try:
        if source is not None:
            return await app.run_source(source)
        return await app.run(prompt, single_input)
    finally:
        await translator.aclose()


def _run_until_complete(coro: Coroutine[Any, Any, int]) -> int:
    # asyncio.run() installs a SIGINT handler that only cancels the main
    # task, which cannot interrupt a blocking read from the terminal.
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.run_until_complete(loop.shutdown_asyncgens())
        loop.close()


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.text is not None and args.file:
        parser.error("give either TEXT or --file, not both")

    try:
        cfg = load_config(args.config, provider=args.provider)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    apply_overrides(cfg, args)
    configure_logging(cfg.logging)

    if args.show_config:
        print_config_summary(cfg)
        return 0

    prompt = cfg.console.prompt

    source: InputSource | None = None
    if args.file:
        try:
            source = FileSource(args.file, prompt=prompt)
        except OSError as e:
            print(f"Error: cannot read {args.file}: {e}", file=sys.stderr)
            return 1

    try:
        translator = build_translator(cfg)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    app = ConsoleApp(translator)
    try:
        return _run_until_complete(
            _run_session(app, translator, prompt=prompt, single_input=args.text, source=source)
        )
    except KeyboardInterrupt:
        # Ctrl+C outside the loop's own handling (e.g. while closing).
        print()
        return 0


if __name__ == "__main__":
    sys.exit(main())
