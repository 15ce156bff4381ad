"""Read trip documents from JSON files."""

import json
import logging
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from .exceptions import TripFileError
from .models import Expense, TripDocument, TripSettings

logger = logging.getLogger(__name__)

_expense_list = TypeAdapter(list[Expense])


def parse_trip_document(
    data: object,
    source: str = "<data>",
    default_settings: TripSettings | None = None,
) -> TripDocument:
    """
    Parse decoded JSON into a trip document.

    Accepts either a full document ({"settings": ..., "expenses": [...]})
    or a bare list of expenses, which gets ``default_settings``.

    Args:
        data: Decoded JSON value
        source: Name used in error messages
        default_settings: Settings for a bare expense list

    Returns:
        Parsed trip document

    Raises:
        TripFileError: If the data does not describe a trip
    """
    try:
        if isinstance(data, list):
            return TripDocument(
                settings=default_settings or TripSettings(),
                expenses=_expense_list.validate_python(data),
            )
        return TripDocument.model_validate(data)
    except ValidationError as e:
        raise TripFileError(source, f"Invalid trip data in {source}:\n{e}") from e


def load_trip_document(
    path: Path, default_settings: TripSettings | None = None
) -> TripDocument:
    """Read and parse a trip document from a JSON file."""
    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise TripFileError(str(path), f"Could not read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise TripFileError(str(path), f"{path} is not valid JSON: {e}") from e

    document = parse_trip_document(
        data, source=str(path), default_settings=default_settings
    )
    logger.debug(f"Loaded {len(document.expenses)} expenses from {path}")
    return document
