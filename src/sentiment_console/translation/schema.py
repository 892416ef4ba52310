"""Target schemas for the JSON translator.

A ``TargetSchema`` pairs a human-readable type name with the pydantic model
that a successful translation must validate against.  The translator uses
the model twice: once to describe the expected shape in the prompt, and
once to validate whatever the completion model sends back.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Generic, Literal, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T", bound=BaseModel)


class SentimentResponse(BaseModel):
    """Sentiment classification of a single piece of user text.

    Attributes:
        sentiment: One of ``"negative"``, ``"neutral"`` or ``"positive"``.
    """

    sentiment: Literal["negative", "neutral", "positive"] = Field(
        ...,
        description="The sentiment of the text",
    )


@dataclass(frozen=True)
class TargetSchema(Generic[T]):
    """Fixed descriptor of the structured value a translation must produce.

    Attributes:
        name:  Type name shown to the model (e.g. ``"SentimentResponse"``).
        model: Pydantic model class used for validation.
    """

    name: str
    model: type[T]

    def schema_text(self) -> str:
        """JSON schema of ``model``, indented for readability in a prompt."""
        return json.dumps(self.model.model_json_schema(), indent=2)


SENTIMENT_SCHEMA: TargetSchema[SentimentResponse] = TargetSchema(
    name="SentimentResponse",
    model=SentimentResponse,
)
