"""
Factory functions for the extraction module.

The Anthropic client owns a pooled httpx.AsyncClient, so a single instance is
shared by the whole process and closed on application shutdown.
"""
from typing import Annotated, Optional

from fastapi import Depends

from budget_helper.config import settings
from budget_helper.extraction.client import AnthropicClient
from budget_helper.extraction.service import BillExtractionService

_anthropic_client: Optional[AnthropicClient] = None


def get_anthropic_client() -> AnthropicClient:
    global _anthropic_client
    if _anthropic_client is None:
        _anthropic_client = AnthropicClient(
            api_key=settings.ANTHROPIC_API_KEY,
            base_url=settings.ANTHROPIC_API_URL,
            version=settings.ANTHROPIC_VERSION,
            model=settings.ANTHROPIC_MODEL,
            max_tokens=settings.ANTHROPIC_MAX_TOKENS,
            timeout=settings.ANTHROPIC_TIMEOUT,
        )
    return _anthropic_client


async def close_anthropic_client() -> None:
    global _anthropic_client
    if _anthropic_client is not None:
        await _anthropic_client.aclose()
        _anthropic_client = None


def get_extraction_service() -> BillExtractionService:
    return BillExtractionService(client=get_anthropic_client())


ExtractionServiceDependency = Annotated[BillExtractionService, Depends(get_extraction_service)]
