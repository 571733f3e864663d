from fastapi import APIRouter

from budget_helper.extraction.dependencies import ExtractionServiceDependency

router = APIRouter()

@router.get("/health")
async def health_check(service: ExtractionServiceDependency):
    """Basic health check, reports whether the Anthropic API key is set"""
    return {
        "status": "ok",
        "service": "budget-helper-api",
        "extraction_configured": service.is_configured,
    }
