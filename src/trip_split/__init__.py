"""trip-split - Settle shared trip expenses between travel companions."""

__version__ = "0.1.0"

from .config import Settings, load_settings
from .ledger import TripLedger
from .loader import load_trip_document, parse_trip_document
from .models import (
    Expense,
    SettlementReport,
    Transfer,
    TranslationRecord,
    TripDocument,
    TripSettings,
)
from .settlement import compute_net_balances, settle, settle_report

__all__ = [
    "Settings",
    "load_settings",
    "TripLedger",
    "load_trip_document",
    "parse_trip_document",
    "Expense",
    "SettlementReport",
    "Transfer",
    "TranslationRecord",
    "TripDocument",
    "TripSettings",
    "compute_net_balances",
    "settle",
    "settle_report",
]
