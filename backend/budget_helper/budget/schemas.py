from typing import Dict, List

from pydantic import ConfigDict, Field, field_validator

from budget_helper.common.schemas import AppBaseModel, ResponseModel
from budget_helper.extraction.schemas import BillCategory

# Górny limit pojedynczej kwoty; powyżej Decimal.quantize traci precyzję kontekstu
MAX_AMOUNT = 1_000_000_000_000


class BudgetInput(AppBaseModel):
    """Monthly figures entered by the user"""
    # Klucze słownika przychodzą z JSON-a jako zwykłe stringi
    model_config = ConfigDict(strict=False)

    salary: float = Field(0.0, ge=0, le=MAX_AMOUNT, description="Monthly net income")
    budget: float = Field(0.0, ge=0, le=MAX_AMOUNT, description="Planned monthly spending")
    manual_expenses: Dict[BillCategory, float] = Field(
        default_factory=dict,
        description="Hand-entered expense totals per category"
    )
    include_bills: bool = Field(True, description="Add completed bills to the expenses")

    @field_validator("manual_expenses")
    @classmethod
    def validate_manual_expenses(cls, v: Dict[BillCategory, float]) -> Dict[BillCategory, float]:
        for category, amount in v.items():
            if amount < 0:
                raise ValueError(f"Expense for {category.value} cannot be negative")
            if amount > MAX_AMOUNT:
                raise ValueError(f"Expense for {category.value} cannot exceed {MAX_AMOUNT}")
        return v


class CategoryShare(ResponseModel):
    category: BillCategory = Field(..., description="Expense category")
    amount: float = Field(..., ge=0, description="Total spent in the category")
    ratio: float = Field(..., ge=0, le=1, description="Share of total expenses (0.0-1.0)")


class BudgetSummary(ResponseModel):
    total_income: float = Field(..., description="Monthly income")
    budget: float = Field(..., description="Planned monthly spending")
    total_expenses: float = Field(..., description="Manual expenses + completed bills")
    remaining_income: float = Field(..., description="Income left after expenses (may be negative)")
    remaining_budget: float = Field(..., description="Budget left after expenses (may be negative)")
    categories: List[CategoryShare] = Field(..., description="Per-category totals and ratios")
    bills_counted: int = Field(..., ge=0, description="Completed bills with a usable amount")
    bills_skipped: int = Field(..., ge=0, description="Completed bills whose amount was missing or invalid")
