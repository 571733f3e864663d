"""
Factory functions for the ingestion pipeline.

The registry and the service outlive a single request (extraction tasks keep
running after the upload request returns), so both are process-wide singletons.
"""
from typing import Annotated, Optional

from fastapi import Depends

from budget_helper.config import settings
from budget_helper.bills.registry import BillRegistry
from budget_helper.bills.service import BillIngestionService
from budget_helper.extraction.dependencies import get_extraction_service

_bill_registry: Optional[BillRegistry] = None
_ingestion_service: Optional[BillIngestionService] = None


def get_bill_registry() -> BillRegistry:
    global _bill_registry
    if _bill_registry is None:
        _bill_registry = BillRegistry()
    return _bill_registry


def get_ingestion_service() -> BillIngestionService:
    global _ingestion_service
    if _ingestion_service is None:
        _ingestion_service = BillIngestionService(
            extraction_service=get_extraction_service(),
            registry=get_bill_registry(),
            max_concurrency=settings.INGESTION_MAX_CONCURRENCY,
        )
    return _ingestion_service


async def shutdown_ingestion_service() -> None:
    """Waits for in-flight extractions so no task is cut off mid-request."""
    if _ingestion_service is not None:
        await _ingestion_service.join()


BillRegistryDependency = Annotated[BillRegistry, Depends(get_bill_registry)]
IngestionServiceDependency = Annotated[BillIngestionService, Depends(get_ingestion_service)]
