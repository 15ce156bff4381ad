"""Tests for the OpenAI-backed translator."""

from unittest.mock import MagicMock, patch

import httpx
import openai
import pytest

from trip_split.clients.translator import TranslationSession, Translator
from trip_split.exceptions import MissingCredentialError, TranslationServiceError

REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


def make_response(content: str | None) -> MagicMock:
    """Create a mock chat completion response."""
    response = MagicMock()
    response.choices[0].message.content = content
    return response


@pytest.fixture
def mock_openai():
    """Patch the OpenAI client class used by the translator."""
    with patch("trip_split.clients.translator.OpenAI") as mock_class:
        client = MagicMock()
        mock_class.return_value = client
        yield client


class TestTranslate:
    """Tests for Translator.translate."""

    def test_returns_translation(self, mock_openai):
        mock_openai.chat.completions.create.return_value = make_response(
            "  駅はどこですか？ "
        )

        result = Translator("sk-test").translate(
            "Where is the station?", target_language="Japanese"
        )

        assert result == "駅はどこですか？"
        kwargs = mock_openai.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o-mini"
        assert kwargs["temperature"] == 0.3
        prompt = kwargs["messages"][1]["content"]
        assert "into Japanese" in prompt
        assert "Where is the station?" in prompt

    def test_source_language_in_prompt(self, mock_openai):
        mock_openai.chat.completions.create.return_value = make_response("你好")

        Translator("sk-test").translate(
            "こんにちは", target_language="Traditional Chinese", source_language="Japanese"
        )

        prompt = mock_openai.chat.completions.create.call_args.kwargs["messages"][1][
            "content"
        ]
        assert "from Japanese into Traditional Chinese" in prompt

    def test_blank_text_skips_service(self, mock_openai):
        assert Translator("sk-test").translate("   ") == ""
        mock_openai.chat.completions.create.assert_not_called()

    def test_missing_key(self):
        with pytest.raises(MissingCredentialError, match="OPENAI_API_KEY"):
            Translator(None).translate("hello")

    def test_rejected_key(self, mock_openai):
        mock_openai.chat.completions.create.side_effect = openai.AuthenticationError(
            "Incorrect API key provided",
            response=httpx.Response(401, request=REQUEST),
            body=None,
        )

        with pytest.raises(MissingCredentialError, match="rejected"):
            Translator("sk-bad").translate("hello")

    def test_service_error(self, mock_openai):
        mock_openai.chat.completions.create.side_effect = openai.APIConnectionError(
            request=REQUEST
        )

        with pytest.raises(TranslationServiceError):
            Translator("sk-test").translate("hello")

    def test_empty_reply(self, mock_openai):
        mock_openai.chat.completions.create.return_value = make_response(None)

        with pytest.raises(TranslationServiceError, match="no text"):
            Translator("sk-test").translate("hello")

    def test_credential_error_is_distinguishable(self):
        """Both failures share a base class but stay distinct."""
        assert not issubclass(MissingCredentialError, TranslationServiceError)
        assert not issubclass(TranslationServiceError, MissingCredentialError)


class TestTranslationSession:
    """Tests for TranslationSession history."""

    def test_history_newest_first(self):
        translator = MagicMock()
        translator.translate.side_effect = ["一", "二"]
        session = TranslationSession(translator, target_language="Japanese")

        session.translate("one")
        record = session.translate("two")

        assert record.translated == "二"
        assert record.target_language == "Japanese"
        assert [r.original for r in session.history] == ["two", "one"]

    def test_failed_translation_not_recorded(self):
        translator = MagicMock()
        translator.translate.side_effect = TranslationServiceError("boom")
        session = TranslationSession(translator)

        with pytest.raises(TranslationServiceError):
            session.translate("hello")

        assert session.history == []

    def test_clear(self):
        translator = MagicMock()
        translator.translate.return_value = "hola"
        session = TranslationSession(translator, target_language="Spanish")
        session.translate("hello")

        session.clear()

        assert session.history == []
