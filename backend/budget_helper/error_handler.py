from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from budget_helper.common.exceptions import ResourceNotFoundError
from budget_helper.bills.exceptions import DuplicateBillError, InvalidBillStateError
from budget_helper.extraction.exceptions import (
    FileValidationError,
    ConfigurationError,
    UploadError,
    ExtractionEndpointError,
    MalformedResponseError,
)

def exception_handler(app: FastAPI) -> None:
    """
    Registers global exception handlers for the FastAPI application.
    Translates domain exceptions into HTTP responses.
    """

    @app.exception_handler(ResourceNotFoundError)
    async def resource_not_found_handler(request: Request, exc: ResourceNotFoundError):
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": exc.message},
        )

    @app.exception_handler(DuplicateBillError)
    async def duplicate_bill_handler(request: Request, exc: DuplicateBillError):
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={"detail": exc.message},
        )

    @app.exception_handler(InvalidBillStateError)
    async def invalid_bill_state_handler(request: Request, exc: InvalidBillStateError):
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={"detail": exc.message},
        )

    @app.exception_handler(FileValidationError)
    async def file_validation_error_handler(request: Request, exc: FileValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": str(exc)},
        )

    @app.exception_handler(ConfigurationError)
    async def configuration_error_handler(request: Request, exc: ConfigurationError):
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": exc.message},
        )

    @app.exception_handler(MalformedResponseError)
    async def malformed_response_handler(request: Request, exc: MalformedResponseError):
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": "Model reply is not valid JSON", "raw_text": exc.raw_text},
        )

    @app.exception_handler(UploadError)
    async def upload_error_handler(request: Request, exc: UploadError):
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"detail": str(exc)},
        )

    @app.exception_handler(ExtractionEndpointError)
    async def extraction_endpoint_error_handler(request: Request, exc: ExtractionEndpointError):
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"detail": str(exc)},
        )
