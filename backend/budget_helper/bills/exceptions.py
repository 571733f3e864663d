from budget_helper.common.exceptions import AppError, ResourceNotFoundError
from budget_helper.bills.schemas import BillStatus


class BillNotFoundError(ResourceNotFoundError):
    def __init__(self, bill_id: str):
        super().__init__("Bill", bill_id)


class DuplicateBillError(AppError):
    def __init__(self, bill_id: str):
        self.message = f"Bill with id {bill_id} already exists."
        super().__init__(self.message)


class InvalidBillStateError(AppError):
    """Raised when retry is requested for a bill that is not in ERROR state."""

    def __init__(self, bill_id: str, status: BillStatus):
        self.bill_id = bill_id
        self.status = status
        self.message = f"Bill {bill_id} is {status.value}; only failed bills can be retried."
        super().__init__(self.message)
