"""
Bill ingestion pipeline.

Tracks every submitted file as a BillEntry (processing -> completed | error)
and runs the extraction for each file as an independent asyncio task.
"""

from budget_helper.bills.service import BillIngestionService
from budget_helper.bills.registry import BillRegistry

__all__ = ["BillIngestionService", "BillRegistry"]
