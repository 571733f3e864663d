import enum
from typing import Any, Optional, List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from budget_helper.common.schemas import ResponseModel


class BillCategory(str, enum.Enum):
    OPERATING_EXPENSE = "operating_expense"
    LEARNING_EDUCATION = "learning_education"
    SAVINGS_INVESTMENT = "savings_investment"


class SourceFile(BaseModel):
    """Uploaded file kept in memory so a failed bill can be retried."""
    model_config = ConfigDict(frozen=True)

    name: str
    media_type: str
    content: bytes = Field(repr=False)

    @property
    def size(self) -> int:
        return len(self.content)


class ExtractedBill(BaseModel):
    """
    Lenient, typed view of an extraction result.

    The model reply is not guaranteed to match the requested schema, so every
    field is optional and unknown fields are kept. Text fields of another
    type are read as numbers or treated as unreadable, `items` always ends up
    a list. Only a reply that is not a JSON object fails validation.
    """
    model_config = ConfigDict(extra="allow")

    vendor: Optional[str] = None
    amount: Optional[Any] = None
    date: Optional[str] = None
    category: Optional[str] = None
    items: List[Any] = Field(default_factory=list)

    @field_validator("vendor", "date", "category", mode="before")
    @classmethod
    def text_or_none(cls, v: Any) -> Optional[str]:
        if v is None or isinstance(v, str):
            return v
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return None

    @field_validator("items", mode="before")
    @classmethod
    def items_as_list(cls, v: Any) -> List[Any]:
        if v is None:
            return []
        return v if isinstance(v, list) else [v]


class ExtractionResponse(ResponseModel):
    """Odpowiedź endpointu analizy pojedynczego pliku"""
    success: bool = Field(default=True, description="Status operacji")
    file_name: str = Field(..., description="Nazwa analizowanego pliku")
    data: Any = Field(..., description="Parsed extraction result (unvalidated JSON)")
    execution_time: float = Field(..., description="Czas przetwarzania w sekundach")
