"""Output validator for the JSON translator.

``JsonValidator`` takes raw completion text and decides whether it holds a
value of the target schema.  It never raises for bad model output: it
returns ``(value, None)`` on success and ``(None, error_text)`` otherwise.
The error text is written for the model, not the user, because the
translator sends it back in a repair prompt.

Validation pipeline (applied in order)
---------------------------------------
1. **Empty check**: blank string → error.
2. **Fence stripping**: models often wrap JSON in ```json ... ``` fences.
3. **Object extraction**: everything outside the outermost ``{...}`` is
   discarded (leading chatter such as "Here is the JSON:").
4. **JSON parsing**: ``json.loads``.
5. **Schema validation**: ``model.model_validate``; the pydantic error
   list is flattened into one line per problem.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from pydantic import BaseModel, ValidationError

from sentiment_console.translation.schema import TargetSchema

logger = logging.getLogger(__name__)

# ```json\n{...}\n```  or  ```\n{...}\n```
_FENCE_PATTERN = re.compile(r"^```[a-zA-Z]*\s*(.*?)\s*```$", re.DOTALL)


def _format_validation_error(error: ValidationError) -> str:
    """One ``field: message`` line per pydantic error."""
    lines = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ())) or "(root)"
        lines.append(f"{location}: {item.get('msg', 'invalid value')}")
    return "\n".join(lines)


class JsonValidator:
    """Parses and schema-checks raw completion text."""

    def validate(self, raw: str, schema: TargetSchema) -> tuple[BaseModel | None, str | None]:
        """Validate a raw completion against ``schema``.

        Args:
            raw:    Text returned by the completion model.
            schema: Descriptor whose pydantic model the JSON must satisfy.

        Returns:
            ``(value, None)`` when valid, ``(None, reason)`` otherwise.
        """
        # ── 1. Empty check ────────────────────────────────────────────────────
        if not raw or not raw.strip():
            return None, "Response is empty"

        text = raw.strip()

        # ── 2. Fence stripping ────────────────────────────────────────────────
        fenced = _FENCE_PATTERN.match(text)
        if fenced:
            text = fenced.group(1)

        # ── 3. Object extraction ──────────────────────────────────────────────
        start = text.find("{")
        end = text.rfind("}")
        if start == -1 or end < start:
            logger.warning("JsonValidator: no JSON object in response: %r", text[:60])
            return None, "Response is not a JSON object"
        text = text[start : end + 1]

        # ── 4. JSON parsing ───────────────────────────────────────────────────
        try:
            data: Any = json.loads(text)
        except json.JSONDecodeError as exc:
            logger.warning("JsonValidator: malformed JSON: %s", exc)
            return None, f"Response is not valid JSON: {exc.msg}"

        # ── 5. Schema validation ──────────────────────────────────────────────
        try:
            value = schema.model.model_validate(data)
        except ValidationError as exc:
            reason = _format_validation_error(exc)
            logger.warning(
                "JsonValidator: response does not match %s: %s",
                schema.name,
                reason.replace("\n", "; "),
            )
            return None, reason

        return value, None
