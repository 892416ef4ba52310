"""Unit tests for TranslationResult and TranslationFailure."""

import pytest

from sentiment_console.translation.result import (
    STATUS_API_ERROR,
    STATUS_SUCCESS,
    STATUS_VALIDATION_FAILED,
    TranslationFailure,
    TranslationResult,
)
from sentiment_console.translation.schema import SentimentResponse


@pytest.mark.unit
class TestTranslationResult:
    def test_success_carries_value(self):
        value = SentimentResponse(sentiment="positive")
        result = TranslationResult.success(value, attempts=2)

        assert result.ok is True
        assert result.value is value
        assert result.failure is None
        assert result.status == STATUS_SUCCESS
        assert result.attempts == 2

    def test_fail_carries_failure(self):
        result = TranslationResult.fail(STATUS_API_ERROR, "boom", attempts=1)

        assert result.ok is False
        assert result.value is None
        assert result.failure == TranslationFailure(STATUS_API_ERROR, "boom")
        assert result.status == STATUS_API_ERROR

    def test_requires_exactly_one_of_value_or_failure(self):
        with pytest.raises(ValueError):
            TranslationResult()
        with pytest.raises(ValueError):
            TranslationResult(
                value=SentimentResponse(sentiment="neutral"),
                failure=TranslationFailure(STATUS_VALIDATION_FAILED, "bad"),
            )


@pytest.mark.unit
class TestTranslationFailure:
    def test_str_is_message(self):
        failure = TranslationFailure(STATUS_VALIDATION_FAILED, "sentiment: bad value")
        assert str(failure) == "sentiment: bad value"
