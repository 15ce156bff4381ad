"""OpenAI client for ad-hoc text translation."""

import logging

import openai
from openai import OpenAI

from ..exceptions import MissingCredentialError, TranslationServiceError
from ..models import TranslationRecord

logger = logging.getLogger(__name__)

DEFAULT_TARGET_LANGUAGE = "Traditional Chinese"


class Translator:
    """GPT-based translator for short travel phrases."""

    def __init__(self, api_key: str | None, model: str = "gpt-4o-mini"):
        """Initialize the translator. A missing key only fails on use."""
        self.client = OpenAI(api_key=api_key) if api_key else None
        self.model = model

    def translate(
        self,
        text: str,
        target_language: str = DEFAULT_TARGET_LANGUAGE,
        source_language: str | None = None,
    ) -> str:
        """
        Translate text into the target language.

        Args:
            text: Text to translate
            target_language: Language to translate into
            source_language: Language of the input, or None to auto-detect

        Returns:
            Translated text

        Raises:
            MissingCredentialError: If no API key is configured or it is rejected
            TranslationServiceError: If the service fails or returns nothing
        """
        if not text.strip():
            return ""

        if self.client is None:
            raise MissingCredentialError(
                "OpenAI API key is missing. Set OPENAI_API_KEY in your .env file."
            )

        source_text = f" from {source_language}" if source_language else ""
        prompt = (
            f"Translate the following text{source_text} into {target_language}. "
            f'Keep the original tone and context: "{text}"'
        )

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {
                        "role": "system",
                        "content": "You are a translator. Reply with the translation only.",
                    },
                    {"role": "user", "content": prompt},
                ],
                temperature=0.3,
            )
        except (openai.AuthenticationError, openai.PermissionDeniedError) as e:
            raise MissingCredentialError(f"OpenAI rejected the API key: {e}") from e
        except openai.OpenAIError as e:
            raise TranslationServiceError(f"Translation request failed: {e}") from e

        translated = (response.choices[0].message.content or "").strip()
        if not translated:
            raise TranslationServiceError("Translation service returned no text")

        logger.info(f"Translated {len(text)} chars into {target_language}")
        return translated


class TranslationSession:
    """A translator plus the in-memory history of one interactive session."""

    def __init__(
        self,
        translator: Translator,
        target_language: str = DEFAULT_TARGET_LANGUAGE,
        source_language: str | None = None,
    ):
        self.translator = translator
        self.target_language = target_language
        self.source_language = source_language
        self.history: list[TranslationRecord] = []

    def translate(self, text: str) -> TranslationRecord:
        """Translate text and prepend the result to the history."""
        translated = self.translator.translate(
            text,
            target_language=self.target_language,
            source_language=self.source_language,
        )
        record = TranslationRecord(
            original=text,
            translated=translated,
            source_language=self.source_language,
            target_language=self.target_language,
        )
        self.history.insert(0, record)
        return record

    def clear(self) -> None:
        """Forget the session history."""
        self.history.clear()
