import logging
from typing import Dict, List

from budget_helper.bills.exceptions import BillNotFoundError, DuplicateBillError
from budget_helper.bills.schemas import BillEntry

logger = logging.getLogger(__name__)


class BillRegistry:
    """
    In-memory owner of the session's bill entries.

    Entries are never mutated; an update replaces the whole entry stored under
    its id. Insertion order (submission order) is preserved.
    """

    def __init__(self):
        self._entries: Dict[str, BillEntry] = {}

    def add(self, entry: BillEntry) -> BillEntry:
        if entry.id in self._entries:
            raise DuplicateBillError(entry.id)
        self._entries[entry.id] = entry
        return entry

    def replace(self, entry: BillEntry) -> BillEntry:
        if entry.id not in self._entries:
            raise BillNotFoundError(entry.id)
        self._entries[entry.id] = entry
        logger.debug(f"Bill {entry.id} ({entry.file_name}) -> {entry.status.value}")
        return entry

    def get(self, bill_id: str) -> BillEntry:
        try:
            return self._entries[bill_id]
        except KeyError:
            raise BillNotFoundError(bill_id) from None

    def list(self) -> List[BillEntry]:
        return list(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, bill_id: object) -> bool:
        return bill_id in self._entries
