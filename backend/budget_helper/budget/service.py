import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, Optional

from pydantic import ValidationError

from budget_helper.bills.schemas import BillEntry, BillStatus
from budget_helper.budget.schemas import MAX_AMOUNT, BudgetInput, BudgetSummary, CategoryShare
from budget_helper.extraction.schemas import BillCategory, ExtractedBill

logger = logging.getLogger(__name__)

FALLBACK_CATEGORY = BillCategory.OPERATING_EXPENSE


def coerce_amount(value: Any) -> Optional[Decimal]:
    """
    Converts an extracted `amount` to Decimal.

    Accepts numbers and numeric strings ("12.50", " 7 "). Returns None for
    anything missing, non-numeric, negative, non-finite or above MAX_AMOUNT.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        value = str(value)
    if not isinstance(value, str):
        return None
    try:
        amount = Decimal(value.strip())
    except InvalidOperation:
        return None
    if not amount.is_finite() or amount < 0 or amount > MAX_AMOUNT:
        return None
    return amount


def resolve_category(value: Any) -> BillCategory:
    try:
        return BillCategory(value)
    except ValueError:
        return FALLBACK_CATEGORY


class BudgetService:
    """
    Aggregates income, manual expenses and completed bills into a summary.
    """

    def summarize(self, data: BudgetInput, entries: Iterable[BillEntry]) -> BudgetSummary:
        totals: Dict[BillCategory, Decimal] = {category: Decimal("0") for category in BillCategory}

        for category, amount in data.manual_expenses.items():
            totals[category] += Decimal(str(amount))

        counted = 0
        skipped = 0
        if data.include_bills:
            for entry in entries:
                if entry.status != BillStatus.COMPLETED:
                    continue
                bill = _read_bill(entry)
                amount = coerce_amount(bill.amount) if bill is not None else None
                if amount is None:
                    # Brak lub nieprawidłowa kwota liczy się jako 0
                    logger.warning(
                        f"Bill {entry.id} ({entry.file_name}) has no usable amount "
                        f"({entry.extracted_data if bill is None else bill.amount!r}), counted as 0"
                    )
                    skipped += 1
                    continue
                totals[resolve_category(bill.category)] += amount
                counted += 1

        total_expenses = sum(totals.values(), Decimal("0"))
        salary = Decimal(str(data.salary))
        budget = Decimal(str(data.budget))

        categories = [
            CategoryShare(
                category=category,
                amount=_money(amount),
                ratio=float(round(amount / total_expenses, 4)) if total_expenses > 0 else 0.0,
            )
            for category, amount in totals.items()
        ]

        return BudgetSummary(
            total_income=_money(salary),
            budget=_money(budget),
            total_expenses=_money(total_expenses),
            remaining_income=_money(salary - total_expenses),
            remaining_budget=_money(budget - total_expenses),
            categories=categories,
            bills_counted=counted,
            bills_skipped=skipped,
        )


def _read_bill(entry: BillEntry) -> Optional[ExtractedBill]:
    try:
        return ExtractedBill.model_validate(entry.extracted_data)
    except ValidationError:
        return None


def _money(value: Decimal) -> float:
    return float(value.quantize(Decimal("0.01")))
