from typing import List

from fastapi import APIRouter, File, UploadFile, status

from budget_helper.config import settings
from budget_helper.bills.dependencies import IngestionServiceDependency
from budget_helper.bills.schemas import BillEntryResponse, BillListResponse
from budget_helper.extraction.validation import validate_upload

router = APIRouter()


@router.post("/", response_model=BillListResponse, status_code=status.HTTP_202_ACCEPTED, summary="Submit bills for extraction")
async def submit_bills(service: IngestionServiceDependency, files: List[UploadFile] = File(..., description="Bill images or PDFs")):
    """
    Accept one or more bill files. Each file gets its own entry in `processing`
    state; poll `GET /api/bills` to see them move to `completed` or `error`.

    All files are validated before any entry is created, so an invalid file
    rejects the whole request (400). JPEG, PNG, WEBP, GIF and PDF are recognised
    by content; other images (HEIC, BMP, TIFF) need an `image/*` content type.
    """
    sources = [
        validate_upload(file.filename, await file.read(), settings.MAX_UPLOAD_SIZE, file.content_type)
        for file in files
    ]
    entries = await service.submit(sources)
    return BillListResponse.from_entries(entries)


@router.get("/", response_model=BillListResponse, status_code=status.HTTP_200_OK, summary="List all bills")
async def get_bills(service: IngestionServiceDependency):
    return BillListResponse.from_entries(service.registry.list())


@router.get("/{bill_id}", response_model=BillEntryResponse, status_code=status.HTTP_200_OK, summary="Get bill by ID")
async def get_bill(bill_id: str, service: IngestionServiceDependency):
    return BillEntryResponse.from_entry(service.registry.get(bill_id))


@router.post("/{bill_id}/retry", response_model=BillEntryResponse, status_code=status.HTTP_202_ACCEPTED, summary="Retry a failed bill")
async def retry_bill(bill_id: str, service: IngestionServiceDependency):
    return BillEntryResponse.from_entry(await service.retry(bill_id))
