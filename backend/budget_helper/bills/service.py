"""
Bill ingestion service.

Every file is processed by its own asyncio task: attach → extract → parse,
then the task replaces its BillEntry with a COMPLETED or ERROR entry.
A failure never leaves the task, so sibling files are not affected.
"""
import asyncio
import logging
from typing import List, Sequence, Set

from budget_helper.bills.exceptions import InvalidBillStateError
from budget_helper.bills.registry import BillRegistry
from budget_helper.bills.schemas import BillEntry, BillStatus
from budget_helper.extraction.exceptions import ExtractionError
from budget_helper.extraction.schemas import SourceFile
from budget_helper.extraction.service import BillExtractionService

logger = logging.getLogger(__name__)


class BillIngestionService:
    """
    Orchestrates the per-file extraction lifecycle.

    Flow (per file):
    1. Create BillEntry (PROCESSING) and publish it in the registry
    2. Spawn a task calling BillExtractionService.analyze()
    3. Replace the entry with COMPLETED (extracted_data) or ERROR (error)
    4. ERROR entries can be retried manually, which re-enters step 2
    """

    def __init__(
        self,
        extraction_service: BillExtractionService,
        registry: BillRegistry,
        max_concurrency: int = 4
    ):
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self.extraction_service = extraction_service
        self.registry = registry
        self._semaphore = asyncio.Semaphore(max_concurrency)
        self._tasks: Set[asyncio.Task] = set()

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    async def submit(self, files: Sequence[SourceFile]) -> List[BillEntry]:
        """
        Accepts files for processing and returns their PROCESSING entries
        without waiting for any extraction to finish.
        """
        entries = []
        for source in files:
            entry = self.registry.add(BillEntry.processing(source))
            logger.info(f"Bill {entry.id} accepted: {entry.file_name}")
            self._spawn(entry)
            entries.append(entry)
        return entries

    async def retry(self, bill_id: str) -> BillEntry:
        """
        Ponownie uruchamia analizę dla rachunku w stanie ERROR,
        używając pliku zapamiętanego przy pierwszym zgłoszeniu.

        Raises:
            BillNotFoundError: nieznane ID
            InvalidBillStateError: rachunek nie jest w stanie ERROR
        """
        entry = self.registry.get(bill_id)
        if entry.status != BillStatus.ERROR:
            raise InvalidBillStateError(bill_id, entry.status)

        entry = self.registry.replace(entry.reprocessing())
        logger.info(f"Bill {entry.id} retry requested: {entry.file_name}")
        self._spawn(entry)
        return entry

    async def join(self) -> None:
        """Waits until every in-flight extraction task has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    def _spawn(self, entry: BillEntry) -> None:
        task = asyncio.create_task(self._process(entry), name=f"bill-{entry.id}")
        # Trzymamy referencję, inaczej task może zostać zebrany przez GC
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _process(self, entry: BillEntry) -> None:
        try:
            async with self._semaphore:
                data = await self.extraction_service.analyze(entry.source)
        except ExtractionError as e:
            logger.warning(f"Bill {entry.id} ({entry.file_name}) failed: {e}")
            self._finish(entry.failed(str(e)))
        except Exception as e:
            logger.error(f"Unexpected error processing bill {entry.id} ({entry.file_name}): {e}", exc_info=True)
            self._finish(entry.failed(f"Unexpected error: {e}"))
        else:
            logger.info(f"Bill {entry.id} ({entry.file_name}) completed")
            self._finish(entry.completed(data))

    def _finish(self, entry: BillEntry) -> None:
        self.registry.replace(entry)
