"""Debt-settlement engine: turns shared trip expenses into pairwise transfers."""

import logging
from collections.abc import Iterable, Sequence
from decimal import ROUND_CEILING, ROUND_FLOOR, ROUND_HALF_UP, Decimal

from .models import Expense, SettlementReport, Transfer

logger = logging.getLogger(__name__)

# One minor currency unit. Balances closer to zero than this are settled.
TOLERANCE = Decimal("0.01")
CENTS = Decimal("0.01")

Balances = dict[str, Decimal]


def quantize_amount(amount: Decimal) -> Decimal:
    """
    Round an amount to two decimal places.
    Uses ROUND_HALF_UP for consistency.

    Args:
        amount: Unrounded amount as Decimal

    Returns:
        Amount rounded to cents
    """
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def is_settled(balance: Decimal) -> bool:
    """Check whether a balance is within tolerance of zero."""
    return abs(balance) <= TOLERANCE


def group_by_currency(
    expenses: Iterable[Expense],
) -> tuple[dict[str, list[Expense]], list[str]]:
    """
    Partition shared expenses by currency.

    Non-shared expenses are dropped. Shared expenses without participants
    are skipped and reported back instead of failing the whole run.

    Args:
        expenses: Expenses in any currency

    Returns:
        Tuple of (currency -> shared expenses, skipped expense ids)
    """
    groups: dict[str, list[Expense]] = {}
    skipped: list[str] = []

    for expense in expenses:
        if not expense.is_shared:
            continue
        if not expense.participants:
            logger.warning(
                f"Skipping shared expense {expense.id} "
                f"({expense.description or 'no description'}): no participants"
            )
            skipped.append(expense.id)
            continue
        groups.setdefault(expense.currency, []).append(expense)

    return groups, skipped


def compute_net_balances(expenses: Iterable[Expense]) -> Balances:
    """
    Fold expenses of a single currency into signed net balances.

    The payer is credited the full amount and every participant is debited
    an equal share. Nothing is rounded here.

    Args:
        expenses: Shared expenses, all in the same currency

    Returns:
        Mapping of member -> balance (positive = is owed money)
    """
    balances: Balances = {}

    for expense in expenses:
        if not expense.participants:
            continue
        share = expense.amount / len(expense.participants)
        balances[expense.payer] = balances.get(expense.payer, Decimal("0")) + (
            expense.amount
        )
        for member in expense.participants:
            balances[member] = balances.get(member, Decimal("0")) - share

    return balances


def partition_balances(
    balances: Balances,
    threshold: Decimal = TOLERANCE,
) -> tuple[list[tuple[str, Decimal]], list[tuple[str, Decimal]]]:
    """
    Split balances into creditors and debtors.

    Both lists hold (member, absolute balance) pairs, largest first, with
    ties broken by member name so the order never depends on input order.
    Members within ``threshold`` of zero appear in neither list.

    Args:
        balances: Signed net balances for one currency
        threshold: Smallest absolute balance that still counts

    Returns:
        Tuple of (creditors, debtors)
    """
    creditors = [(m, bal) for m, bal in balances.items() if bal > threshold]
    debtors = [(m, -bal) for m, bal in balances.items() if bal < -threshold]

    creditors.sort(key=lambda x: (-x[1], x[0]))
    debtors.sort(key=lambda x: (-x[1], x[0]))

    return creditors, debtors


def round_balances(balances: Balances) -> Balances:
    """
    Round balances to cents so that they sum to exactly zero.

    Steps:
    1. Round every balance down to cents
    2. Compute residual = 0 - sum of rounded balances
    3. If the residual is negative, round up instead
    4. Hand the residual out one cent at a time, starting with the members
       whose rounding moved them furthest (ties broken by name)

    Every member ends within one cent of its unrounded balance.

    Args:
        balances: Signed net balances for one currency

    Returns:
        Cent-exact balances summing to zero
    """
    rounded = {
        m: bal.quantize(CENTS, rounding=ROUND_FLOOR) for m, bal in balances.items()
    }
    step = CENTS
    residual = -sum(rounded.values(), Decimal("0"))

    if residual < 0:
        rounded = {
            m: bal.quantize(CENTS, rounding=ROUND_CEILING)
            for m, bal in balances.items()
        }
        step = -CENTS
        residual = -sum(rounded.values(), Decimal("0"))

    order = sorted(rounded, key=lambda m: (-abs(balances[m] - rounded[m]), m))
    idx = 0
    while residual != 0:
        member = order[idx % len(order)]
        rounded[member] += step
        residual -= step
        idx += 1

    if idx:
        logger.debug(f"Applied rounding adjustment of {idx} cent(s)")

    return rounded


def match_transfers(balances: Balances, currency: str) -> list[Transfer]:
    """
    Greedily match the largest debtor with the largest creditor.

    Steps:
    1. Drop members within tolerance of zero
    2. Round the rest to cents so they sum to exactly zero
    3. Partition into creditors and debtors (sorted, largest first)
    4. Transfer min(creditor remaining, debtor remaining)
    5. Advance each side whose remaining balance reached zero
    6. Stop when either side runs out

    Args:
        balances: Signed net balances for one currency
        currency: Currency tag stamped on every transfer

    Returns:
        Transfers in emission order
    """
    parties = {m: bal for m, bal in balances.items() if not is_settled(bal)}
    creditors, debtors = partition_balances(
        round_balances(parties), threshold=Decimal("0")
    )
    credit = [bal for _, bal in creditors]
    debt = [bal for _, bal in debtors]

    transfers: list[Transfer] = []
    i = j = 0

    while i < len(creditors) and j < len(debtors):
        amount = quantize_amount(min(credit[i], debt[j]))

        transfers.append(
            Transfer(
                from_member=debtors[j][0],
                to_member=creditors[i][0],
                amount=amount,
                currency=currency,
            )
        )

        credit[i] -= amount
        debt[j] -= amount

        if credit[i] == 0:
            i += 1
        if debt[j] == 0:
            j += 1

    return transfers


def apply_transfers(balances: Balances, transfers: Iterable[Transfer]) -> Balances:
    """
    Apply transfers to a balance map without mutating it.

    Paying money reduces what the payer owes (balance goes up) and reduces
    what the receiver is owed (balance goes down).

    Args:
        balances: Signed net balances for one currency
        transfers: Transfers in that currency

    Returns:
        New balance map after every transfer is paid
    """
    result = dict(balances)
    for transfer in transfers:
        result[transfer.from_member] = (
            result.get(transfer.from_member, Decimal("0")) + transfer.amount
        )
        result[transfer.to_member] = (
            result.get(transfer.to_member, Decimal("0")) - transfer.amount
        )
    return result


def settle_report(expenses: Sequence[Expense]) -> SettlementReport:
    """
    Compute balances and settling transfers for every currency.

    Each currency is settled on its own; amounts are never converted.
    Currencies are processed in sorted order.

    Args:
        expenses: All recorded expenses of a trip

    Returns:
        Report with transfers, per-currency balances and skipped expense ids
    """
    groups, skipped = group_by_currency(expenses)

    report = SettlementReport(skipped_expense_ids=skipped)
    for currency in sorted(groups):
        balances = compute_net_balances(groups[currency])
        transfers = match_transfers(balances, currency)

        report.balances[currency] = balances
        report.transfers.extend(transfers)

        logger.debug(
            f"Settled {len(groups[currency])} {currency} expenses "
            f"with {len(transfers)} transfers"
        )

    return report


def settle(expenses: Sequence[Expense]) -> list[Transfer]:
    """
    Compute the transfers that settle all shared expenses.

    Args:
        expenses: All recorded expenses of a trip

    Returns:
        Transfers grouped by currency (sorted), in greedy emission order
    """
    return settle_report(expenses).transfers
