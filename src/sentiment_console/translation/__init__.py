"""Text → typed value translation layer for sentiment_console.

This package turns one line of free-form text into a validated pydantic
value by asking a remote completion model for JSON.

Architecture
------------
The request loop only knows the ``Translator`` protocol: one coroutine
taking the text and a ``TargetSchema`` and returning a
``TranslationResult``.  Everything below that line lives here.

Package structure
-----------------
schema.py      TargetSchema, SentimentResponse: what a result must look like.
result.py      TranslationResult, TranslationFailure: outcome types.
model.py       OpenAIChatModel, AzureOpenAIChatModel, OllamaChatModel:
               async HTTP clients for chat-completion endpoints.
prompts.py     Request and repair prompt text.
validator.py   JsonValidator: extracts, parses and schema-checks raw output.
translator.py  JsonTranslator: orchestrates the others; the single entry
               point used by the console.

Typical call flow
-----------------
1. console calls ``translator.translate(line, SENTIMENT_SCHEMA)``
2. the request prompt embeds the schema's JSON schema and the line
3. the model is called over HTTP
4. the validator checks the raw answer
5. on a mismatch, one repair round-trip is attempted
6. success → value; any failure → ``TranslationFailure``
"""

from sentiment_console.translation.model import (
    AzureOpenAIChatModel,
    CompletionModel,
    ModelError,
    OllamaChatModel,
    OpenAIChatModel,
    create_model,
)
from sentiment_console.translation.result import TranslationFailure, TranslationResult
from sentiment_console.translation.schema import SENTIMENT_SCHEMA, SentimentResponse, TargetSchema
from sentiment_console.translation.translator import JsonTranslator, Translator
from sentiment_console.translation.validator import JsonValidator

__all__ = [
    "AzureOpenAIChatModel",
    "CompletionModel",
    "JsonTranslator",
    "JsonValidator",
    "ModelError",
    "OllamaChatModel",
    "OpenAIChatModel",
    "SENTIMENT_SCHEMA",
    "SentimentResponse",
    "TargetSchema",
    "TranslationFailure",
    "TranslationResult",
    "Translator",
    "create_model",
]
