from fastapi import APIRouter, status

from budget_helper.bills.dependencies import BillRegistryDependency
from budget_helper.budget.schemas import BudgetInput, BudgetSummary
from budget_helper.budget.service import BudgetService

router = APIRouter()


@router.post("/summary", response_model=BudgetSummary, status_code=status.HTTP_200_OK, summary="Summarize income and expenses")
async def budget_summary(data: BudgetInput, registry: BillRegistryDependency):
    """
    Combine the monthly income, hand-entered expenses and every completed bill
    into totals and per-category ratios.

    Bills whose extracted amount is missing or not a number count as 0 and are
    reported in `bills_skipped`.
    """
    return BudgetService().summarize(data, registry.list())
