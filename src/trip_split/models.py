"""Pydantic domain models for trip-split."""

from datetime import date, datetime
from decimal import Decimal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DEFAULT_HOME_CURRENCY = "TWD"
DEFAULT_DESTINATION_CURRENCY = "JPY"


def _new_id() -> str:
    return uuid4().hex


# ============================================================================
# Expense Models
# ============================================================================


class Expense(BaseModel):
    """A recorded trip expense.

    Only ``payer``, ``amount``, ``currency``, ``participants`` and
    ``is_shared`` take part in settlement; the rest is for display.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(default_factory=_new_id)
    payer: str
    amount: Decimal = Field(gt=0)
    currency: str
    participants: list[str] = Field(default_factory=list)
    is_shared: bool = Field(default=True, alias="isShared")
    description: str = ""
    expense_date: date = Field(default_factory=date.today, alias="date")

    @field_validator("currency")
    @classmethod
    def normalize_currency(cls, value: str) -> str:
        """Currency tags are compared case-insensitively."""
        value = value.strip().upper()
        if not value:
            raise ValueError("currency must not be empty")
        return value

    @field_validator("participants")
    @classmethod
    def dedupe_participants(cls, value: list[str]) -> list[str]:
        """Participants form a set; keep the first occurrence of each name."""
        return list(dict.fromkeys(value))


class Transfer(BaseModel):
    """A payment instruction: ``from_member`` pays ``to_member``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_member: str = Field(alias="from")
    to_member: str = Field(alias="to")
    amount: Decimal = Field(gt=0)
    currency: str


class SettlementReport(BaseModel):
    """Result of a settlement run.

    ``balances`` maps currency -> member -> signed net balance (positive
    means the member is owed money). ``skipped_expense_ids`` lists shared
    expenses that were excluded because they had no participants.
    """

    transfers: list[Transfer] = Field(default_factory=list)
    balances: dict[str, dict[str, Decimal]] = Field(default_factory=dict)
    skipped_expense_ids: list[str] = Field(default_factory=list)

    @property
    def currencies(self) -> list[str]:
        """Currencies that had at least one shared expense."""
        return sorted(self.balances)

    def transfers_for(self, currency: str) -> list[Transfer]:
        """Get transfers in a single currency, in emission order."""
        return [t for t in self.transfers if t.currency == currency.upper()]


# ============================================================================
# Trip Models
# ============================================================================


class TripSettings(BaseModel):
    """Trip-wide settings: dates, members and the two default currencies."""

    name: str = "My Trip"
    start_date: date | None = None
    end_date: date | None = None
    members: list[str] = Field(default_factory=list)
    home_currency: str = DEFAULT_HOME_CURRENCY
    destination_currency: str = DEFAULT_DESTINATION_CURRENCY

    @field_validator("members")
    @classmethod
    def unique_members(cls, value: list[str]) -> list[str]:
        """Strip member names, drop blanks and duplicates."""
        names = [name.strip() for name in value if name.strip()]
        return list(dict.fromkeys(names))

    @model_validator(mode="after")
    def check_dates(self) -> "TripSettings":
        """Reject an end date before the start date."""
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError(
                f"end_date {self.end_date} is before start_date {self.start_date}"
            )
        return self


class TripDocument(BaseModel):
    """A trip as read from a JSON file: settings plus recorded expenses."""

    settings: TripSettings = Field(default_factory=TripSettings)
    expenses: list[Expense] = Field(default_factory=list)


# ============================================================================
# Translation Models
# ============================================================================


class TranslationRecord(BaseModel):
    """One completed translation, kept in the session history."""

    id: str = Field(default_factory=_new_id)
    original: str
    translated: str
    source_language: str | None = None
    target_language: str
    timestamp: datetime = Field(default_factory=datetime.now)
