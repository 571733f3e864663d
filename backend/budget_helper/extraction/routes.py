import time

from fastapi import APIRouter, File, UploadFile

from budget_helper.config import settings
from budget_helper.extraction.dependencies import ExtractionServiceDependency
from budget_helper.extraction.schemas import ExtractionResponse
from budget_helper.extraction.validation import validate_upload

router = APIRouter(prefix="/extraction", tags=["extraction"])


@router.post("/analyze", response_model=ExtractionResponse)
async def analyze_bill(service: ExtractionServiceDependency, file: UploadFile = File(..., description="Bill image or PDF")) -> ExtractionResponse:
    """
    Analyze a single bill synchronously and return the extracted record.

    Use `POST /api/bills` to track several files with per-file status and retry.

    **Response:**
    - Success (200): parsed extraction result
    - Error (400): invalid file format or size. JPEG, PNG, WEBP, GIF and PDF
      are recognised by content; other formats pass only with an `image/*`
      content type
    - Error (422): model reply was not valid JSON
    - Error (502): attachment upload or completion call failed
    - Error (503): API key not configured
    """
    start_time = time.perf_counter()

    source = validate_upload(file.filename, await file.read(), settings.MAX_UPLOAD_SIZE, file.content_type)
    # Wyjątki domenowe propagują się do globalnego exception handlera
    data = await service.analyze(source)

    return ExtractionResponse(
        success=True,
        file_name=source.name,
        data=data,
        execution_time=time.perf_counter() - start_time,
    )
