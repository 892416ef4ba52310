"""Prompt text for the JSON translator.

Two prompts exist.  The request prompt describes the target schema and
carries the user's text; the repair prompt is appended after an invalid
answer and quotes the validator's complaint back to the model.
"""

from __future__ import annotations

from sentiment_console.translation.schema import TargetSchema

REQUEST_PROMPT_TEMPLATE = (
    "You are a service that translates user requests into JSON objects of type "
    '"{name}" according to the following JSON schema:\n'
    "```\n{schema}\n```\n"
    "The following is a user request:\n"
    '"""\n{text}\n"""\n'
    "The following is the user request translated into a JSON object with 2 spaces "
    "of indentation and no properties with the value null:\n"
)

REPAIR_PROMPT_TEMPLATE = (
    "The JSON object is invalid for the following reason:\n"
    '"""\n{error}\n"""\n'
    "The following is a revised JSON object:\n"
)


def build_request_prompt(text: str, schema: TargetSchema) -> str:
    """Prompt asking the model to translate ``text`` into ``schema``."""
    return REQUEST_PROMPT_TEMPLATE.format(
        name=schema.name,
        schema=schema.schema_text(),
        text=text,
    )


def build_repair_prompt(error: str) -> str:
    """Prompt asking the model to fix its previous answer."""
    return REPAIR_PROMPT_TEMPLATE.format(error=error)
