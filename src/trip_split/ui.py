"""Interactive UI components for the translation session."""

import logging
from typing import Any

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from .clients.translator import TranslationSession
from .exceptions import TranslationServiceError

logger = logging.getLogger(__name__)

COMMON_LANGUAGES = [
    "Traditional Chinese",
    "Simplified Chinese",
    "Japanese",
    "Korean",
    "English",
    "Thai",
    "Vietnamese",
    "French",
    "German",
    "Spanish",
    "Italian",
]

LANGUAGE_COMMAND = ":to "


def fuzzy_match(query: str, text: str) -> bool:
    """
    Fuzzy match: all characters in query must appear in order in text.

    Example:
        query="jp" matches "Japanese"
        query="tch" matches "Traditional Chinese"
    """
    query_idx = 0
    for char in text:
        if query_idx < len(query) and char == query[query_idx]:
            query_idx += 1
    return query_idx == len(query)


class LanguageCompleter(Completer):
    """Completes language names after the ``:to`` command."""

    def __init__(self, languages: list[str] | None = None):
        self.languages = languages or COMMON_LANGUAGES

    def get_completions(self, document: Document, complete_event: Any):
        """Get fuzzy-matched completions."""
        text = document.text_before_cursor
        if not text.startswith(LANGUAGE_COMMAND):
            return

        query = text[len(LANGUAGE_COMMAND) :]
        for language in self.languages:
            if fuzzy_match(query.lower(), language.lower()):
                yield Completion(
                    text=language,
                    start_position=-len(query),
                    display=language,
                )


def handle_line(session: TranslationSession, line: str) -> str | None:
    """
    Handle one line of input in the translation REPL.

    Lines starting with ``:to`` switch the target language, ``:history``
    lists earlier translations and ``:clear`` empties the history. Anything
    else is translated.

    Returns:
        Text to show the user, or None for blank input
    """
    line = line.strip()
    if not line:
        return None

    if line == LANGUAGE_COMMAND.strip() or line.startswith(LANGUAGE_COMMAND):
        language = line[len(LANGUAGE_COMMAND.strip()) :].strip()
        if not language:
            return f"Current target language: {session.target_language}"
        session.target_language = language
        logger.info(f"Switched target language to {language}")
        return f"Target language: {language}"

    if line == ":history":
        if not session.history:
            return "No translations yet."
        return "\n".join(
            f"{record.original} → {record.translated}" for record in session.history
        )

    if line == ":clear":
        session.clear()
        return "History cleared."

    try:
        record = session.translate(line)
    except TranslationServiceError as e:
        return f"❌ {e}"
    return record.translated


def run_translation_repl(session: TranslationSession) -> None:
    """
    Run an interactive translation session until Ctrl+D.

    Missing credentials end the session immediately, since every later
    request would fail the same way.
    """
    print(f"\n🌐 Translating into {session.target_language}")
    print("   :to <language> to switch, :history, :clear, Ctrl+D to quit\n")

    prompt: PromptSession[str] = PromptSession(completer=LanguageCompleter())

    while True:
        try:
            line = prompt.prompt("> ", complete_while_typing=True)
        except KeyboardInterrupt:
            continue
        except EOFError:
            return

        output = handle_line(session, line)
        if output is not None:
            print(output)
