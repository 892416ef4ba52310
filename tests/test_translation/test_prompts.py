"""Unit tests for the request and repair prompt builders."""

import pytest

from sentiment_console.translation.prompts import build_repair_prompt, build_request_prompt
from sentiment_console.translation.schema import SENTIMENT_SCHEMA


@pytest.mark.unit
class TestRequestPrompt:
    def test_names_the_type(self):
        prompt = build_request_prompt("I love this!", SENTIMENT_SCHEMA)
        assert 'JSON objects of type "SentimentResponse"' in prompt

    def test_embeds_schema_and_text(self):
        prompt = build_request_prompt("I love this!", SENTIMENT_SCHEMA)

        assert SENTIMENT_SCHEMA.schema_text() in prompt
        assert '"""\nI love this!\n"""' in prompt

    def test_braces_in_text_survive_formatting(self):
        prompt = build_request_prompt("{not a placeholder}", SENTIMENT_SCHEMA)
        assert "{not a placeholder}" in prompt


@pytest.mark.unit
class TestRepairPrompt:
    def test_quotes_the_error(self):
        prompt = build_repair_prompt("sentiment: Input should be 'negative'")

        assert "invalid" in prompt
        assert "sentiment: Input should be 'negative'" in prompt
        assert prompt.endswith("revised JSON object:\n")
