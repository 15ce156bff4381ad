"""Trip ledger: the owned state container for members and expenses.

The settlement engine never holds state of its own. Callers keep a
``TripLedger``, edit it, and ask it to settle whenever the expense list
changes; every result is recomputed from scratch.
"""

import logging
from collections.abc import Iterable
from datetime import date
from decimal import Decimal

from .exceptions import LedgerError
from .models import Expense, SettlementReport, TripDocument, TripSettings, Transfer
from .settlement import settle, settle_report

logger = logging.getLogger(__name__)


class TripLedger:
    """Members and recorded expenses of a single trip."""

    def __init__(
        self,
        settings: TripSettings | None = None,
        expenses: Iterable[Expense] = (),
    ):
        """Initialize the ledger."""
        self.settings = settings or TripSettings()
        self._expenses: list[Expense] = list(expenses)

    @classmethod
    def from_document(cls, document: TripDocument) -> "TripLedger":
        """Build a ledger from a parsed trip document."""
        return cls(settings=document.settings, expenses=document.expenses)

    def to_document(self) -> TripDocument:
        """Snapshot the ledger as a trip document."""
        return TripDocument(
            settings=self.settings.model_copy(deep=True),
            expenses=list(self._expenses),
        )

    # ========================================================================
    # Members
    # ========================================================================

    @property
    def members(self) -> list[str]:
        return list(self.settings.members)

    def add_member(self, name: str) -> str:
        """Add a trip member. Names are stripped and must be unique."""
        name = name.strip()
        if not name:
            raise LedgerError("Member name must not be empty")
        if name in self.settings.members:
            raise LedgerError(f"Member {name} already exists")

        self.settings.members.append(name)
        logger.info(f"Added member {name}")
        return name

    def remove_member(self, name: str) -> None:
        """
        Remove a trip member.

        Expenses already recorded keep referring to the member, so their
        balances still settle correctly.
        """
        if name not in self.settings.members:
            raise LedgerError(f"Unknown member {name}")

        self.settings.members.remove(name)
        logger.info(f"Removed member {name}")

    # ========================================================================
    # Expenses
    # ========================================================================

    @property
    def expenses(self) -> tuple[Expense, ...]:
        """Snapshot of recorded expenses; add_expense puts new ones first."""
        return tuple(self._expenses)

    def add_expense(
        self,
        amount: Decimal | str | int,
        description: str = "",
        payer: str | None = None,
        currency: str | None = None,
        participants: list[str] | None = None,
        is_shared: bool = True,
        expense_date: date | None = None,
    ) -> Expense:
        """
        Record a new expense.

        Args:
            amount: Total amount paid
            description: Free-text label
            payer: Member who paid (defaults to the first member)
            currency: Currency tag (defaults to the destination currency)
            participants: Members sharing the cost (defaults to everyone)
            is_shared: False for personal expenses that nobody owes
            expense_date: Day of the expense (defaults to today)

        Returns:
            The recorded expense
        """
        if payer is None:
            if not self.settings.members:
                raise LedgerError("Add a member before recording expenses")
            payer = self.settings.members[0]
        if payer not in self.settings.members:
            raise LedgerError(f"Payer {payer} is not a trip member")

        expense = Expense(
            payer=payer,
            amount=Decimal(str(amount)),
            currency=currency or self.settings.destination_currency,
            participants=(
                list(participants)
                if participants is not None
                else list(self.settings.members)
            ),
            is_shared=is_shared,
            description=description,
            expense_date=expense_date or date.today(),
        )

        self._expenses.insert(0, expense)
        logger.info(
            f"Recorded {expense.amount} {expense.currency} paid by {payer} "
            f"({description or 'no description'})"
        )
        return expense

    def remove_expense(self, expense_id: str) -> Expense:
        """Remove a recorded expense by id."""
        for idx, expense in enumerate(self._expenses):
            if expense.id == expense_id:
                del self._expenses[idx]
                logger.info(f"Removed expense {expense_id}")
                return expense
        raise LedgerError(f"Unknown expense {expense_id}")

    def totals_by_currency(self) -> dict[str, Decimal]:
        """Total spend per currency, personal expenses included."""
        totals: dict[str, Decimal] = {}
        for expense in self._expenses:
            totals[expense.currency] = (
                totals.get(expense.currency, Decimal("0")) + expense.amount
            )
        return dict(sorted(totals.items()))

    def expenses_by_date(self) -> dict[date, list[Expense]]:
        """Expenses grouped by day, newest day first."""
        grouped: dict[date, list[Expense]] = {}
        for expense in self._expenses:
            grouped.setdefault(expense.expense_date, []).append(expense)
        return dict(sorted(grouped.items(), reverse=True))

    # ========================================================================
    # Settlement
    # ========================================================================

    def settle(self) -> list[Transfer]:
        """Compute settling transfers for the current expenses."""
        return settle(self.expenses)

    def settle_report(self) -> SettlementReport:
        """Compute the full settlement report for the current expenses."""
        return settle_report(self.expenses)
