"""Unit tests for JsonValidator.

Each test exercises one stage of the validation pipeline: empty check,
fence stripping, object extraction, JSON parsing and schema validation.
"""

import logging

import pytest

from sentiment_console.translation.schema import SENTIMENT_SCHEMA, SentimentResponse
from sentiment_console.translation.validator import JsonValidator


@pytest.fixture
def validator() -> JsonValidator:
    return JsonValidator()


@pytest.mark.unit
class TestValidResponses:
    def test_plain_json(self, validator):
        value, error = validator.validate('{"sentiment": "positive"}', SENTIMENT_SCHEMA)

        assert error is None
        assert value == SentimentResponse(sentiment="positive")

    def test_fenced_json(self, validator):
        raw = '```json\n{\n  "sentiment": "negative"\n}\n```'
        value, error = validator.validate(raw, SENTIMENT_SCHEMA)

        assert error is None
        assert value.sentiment == "negative"

    def test_fence_without_language(self, validator):
        value, _ = validator.validate('```\n{"sentiment": "neutral"}\n```', SENTIMENT_SCHEMA)
        assert value.sentiment == "neutral"

    def test_leading_chatter_is_discarded(self, validator):
        raw = 'Here is the JSON:\n{"sentiment": "positive"}\nHope that helps.'
        value, error = validator.validate(raw, SENTIMENT_SCHEMA)

        assert error is None
        assert value.sentiment == "positive"


@pytest.mark.unit
class TestRejectedResponses:
    @pytest.mark.parametrize("raw", ["", "   ", "\n\t"])
    def test_empty(self, validator, raw):
        assert validator.validate(raw, SENTIMENT_SCHEMA) == (None, "Response is empty")

    def test_no_object(self, validator):
        value, error = validator.validate("positive", SENTIMENT_SCHEMA)

        assert value is None
        assert error == "Response is not a JSON object"

    def test_malformed_json(self, validator):
        value, error = validator.validate('{"sentiment": positive}', SENTIMENT_SCHEMA)

        assert value is None
        assert error.startswith("Response is not valid JSON:")

    def test_label_outside_schema(self, validator):
        value, error = validator.validate('{"sentiment": "ecstatic"}', SENTIMENT_SCHEMA)

        assert value is None
        assert error.startswith("sentiment:")

    def test_missing_field(self, validator):
        value, error = validator.validate('{"mood": "positive"}', SENTIMENT_SCHEMA)

        assert value is None
        assert "sentiment" in error

    def test_rejection_is_logged(self, validator, caplog):
        with caplog.at_level(logging.WARNING, logger="sentiment_console"):
            validator.validate("no json here", SENTIMENT_SCHEMA)

        assert "no JSON object" in caplog.text
