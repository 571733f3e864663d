import enum
import uuid
from datetime import datetime, timezone
from typing import Any, Optional, List

from pydantic import ConfigDict, Field, model_validator

from budget_helper.common.schemas import AppBaseModel, ResponseModel
from budget_helper.extraction.schemas import SourceFile


class BillStatus(str, enum.Enum):
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"


class BillEntry(AppBaseModel):
    """
    One submitted file and its processing lifecycle.

    Entries are immutable: every transition returns a new entry with the same
    `id`, which the registry stores in place of the old one.

    Lifecycle:
    PROCESSING → COMPLETED
              ↘ ERROR → (retry) → PROCESSING
    """
    model_config = ConfigDict(frozen=True, validate_assignment=False)

    id: str
    file_name: str
    upload_time: datetime
    status: BillStatus
    extracted_data: Optional[Any] = None
    error: Optional[str] = None
    # Plik trzymamy tylko dopóki może być potrzebny do (ponownej) analizy
    source: Optional[SourceFile] = Field(None, exclude=True, repr=False)

    @model_validator(mode='after')
    def validate_status_payload(self) -> 'BillEntry':
        """extracted_data only when COMPLETED, error only when ERROR, source until COMPLETED."""
        has_data = self.extracted_data is not None
        has_error = self.error is not None

        if self.status == BillStatus.COMPLETED and (not has_data or has_error):
            raise ValueError("Completed bill must carry extracted_data and no error")
        if self.status == BillStatus.ERROR and (not has_error or has_data):
            raise ValueError("Failed bill must carry an error and no extracted_data")
        if self.status == BillStatus.PROCESSING and (has_data or has_error):
            raise ValueError("Processing bill cannot carry extracted_data or error")
        if self.status == BillStatus.COMPLETED and self.source is not None:
            raise ValueError("Completed bill cannot retain its source file")
        if self.status != BillStatus.COMPLETED and self.source is None:
            raise ValueError(f"Bill in status '{self.status.value}' must retain its source file")
        return self

    @classmethod
    def processing(cls, source: SourceFile) -> 'BillEntry':
        return cls(
            id=uuid.uuid4().hex,
            file_name=source.name,
            upload_time=datetime.now(timezone.utc),
            status=BillStatus.PROCESSING,
            source=source,
        )

    def completed(self, data: Any) -> 'BillEntry':
        return self._transition(status=BillStatus.COMPLETED, extracted_data=data, error=None, source=None)

    def failed(self, message: str) -> 'BillEntry':
        return self._transition(status=BillStatus.ERROR, extracted_data=None, error=message)

    def reprocessing(self) -> 'BillEntry':
        return self._transition(status=BillStatus.PROCESSING, extracted_data=None, error=None)

    def _transition(self, **changes: Any) -> 'BillEntry':
        # model_copy() pomija walidację, więc budujemy nowy obiekt
        values = {name: getattr(self, name) for name in type(self).model_fields}
        values.update(changes)
        return type(self)(**values)


class BillEntryResponse(ResponseModel):
    id: str = Field(..., description="Bill entry ID")
    file_name: str = Field(..., description="Original file name")
    upload_time: datetime = Field(..., description="Submission time (UTC)")
    status: BillStatus = Field(..., description="Processing status")
    extracted_data: Optional[Any] = Field(None, description="Extraction result, only when completed")
    error: Optional[str] = Field(None, description="Failure description, only when error")

    @classmethod
    def from_entry(cls, entry: BillEntry) -> 'BillEntryResponse':
        return cls(
            id=entry.id,
            file_name=entry.file_name,
            upload_time=entry.upload_time,
            status=entry.status,
            extracted_data=entry.extracted_data,
            error=entry.error,
        )


class BillListResponse(ResponseModel):
    items: List[BillEntryResponse] = Field(..., description="Bill entries in submission order")
    total: int = Field(..., ge=0, description="Number of entries")

    @classmethod
    def from_entries(cls, entries: List[BillEntry]) -> 'BillListResponse':
        return cls(items=[BillEntryResponse.from_entry(e) for e in entries], total=len(entries))
