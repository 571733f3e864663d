"""
Pytest configuration and shared fixtures for backend tests.
"""
import json
import re
from typing import AsyncGenerator, Dict, List, Set

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from budget_helper.config import Settings
from budget_helper.bills.dependencies import get_bill_registry, get_ingestion_service
from budget_helper.bills.registry import BillRegistry
from budget_helper.bills.service import BillIngestionService
from budget_helper.extraction.client import AnthropicClient
from budget_helper.extraction.dependencies import get_extraction_service
from budget_helper.extraction.schemas import SourceFile
from budget_helper.extraction.service import BillExtractionService
from main import app

PDF_BYTES = b"%PDF-1.4\n%test bill\n"
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16

DEFAULT_BILL = {
    "vendor": "Corner Shop",
    "amount": 42.5,
    "date": "2024-03-01",
    "category": "operating_expense",
    "items": ["bread", "milk"],
}

_FILENAME_RE = re.compile(rb'filename="([^"]+)"')


def fenced(data) -> str:
    return f"```json\n{json.dumps(data)}\n```"


class FakeAnthropicAPI:
    """
    In-process stand-in for the attachments and messages endpoints.

    Attachment ids are derived from the uploaded file name, so replies and
    failures can be configured per file.
    """

    def __init__(self):
        self.calls: List[httpx.Request] = []
        self.fail_upload: Set[str] = set()
        self.fail_messages: Set[str] = set()
        self.replies: Dict[str, str] = {}
        self.default_reply = fenced(DEFAULT_BILL)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)

        if request.url.path.endswith("/attachments"):
            match = _FILENAME_RE.search(request.content)
            name = match.group(1).decode() if match else "unknown"
            if name in self.fail_upload:
                return httpx.Response(500, text=f"upload rejected: {name}")
            return httpx.Response(200, json={"attachment": {"id": f"att-{name}"}})

        if request.url.path.endswith("/messages"):
            payload = json.loads(request.content)
            attachment_id = payload["messages"][0]["content"][1]["attachment"]["id"]
            name = attachment_id.removeprefix("att-")
            if name in self.fail_messages:
                return httpx.Response(529, text="overloaded")
            text = self.replies.get(name, self.default_reply)
            return httpx.Response(200, json={"content": [{"type": "text", "text": text}]})

        return httpx.Response(404, text="not found")

    def paths(self) -> List[str]:
        return [request.url.path for request in self.calls]


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings with overridden values."""
    return Settings(
        ENV="test",
        PORT=8000,
        ANTHROPIC_API_KEY="test-anthropic-key",
        ANTHROPIC_API_URL="https://anthropic.test/v1",
        ANTHROPIC_MODEL="claude-test",
        ANTHROPIC_MAX_TOKENS=1024,
        INGESTION_MAX_CONCURRENCY=4,
    )


@pytest.fixture
def fake_api() -> FakeAnthropicAPI:
    return FakeAnthropicAPI()


def make_client(settings: Settings, fake_api: FakeAnthropicAPI, api_key: str | None) -> AnthropicClient:
    return AnthropicClient(
        api_key=api_key,
        base_url=settings.ANTHROPIC_API_URL,
        version=settings.ANTHROPIC_VERSION,
        model=settings.ANTHROPIC_MODEL,
        max_tokens=settings.ANTHROPIC_MAX_TOKENS,
        transport=httpx.MockTransport(fake_api.handler),
    )


@pytest.fixture
async def anthropic_client(test_settings: Settings, fake_api: FakeAnthropicAPI) -> AsyncGenerator[AnthropicClient, None]:
    client = make_client(test_settings, fake_api, test_settings.ANTHROPIC_API_KEY)
    yield client
    await client.aclose()


@pytest.fixture
async def unconfigured_client(test_settings: Settings, fake_api: FakeAnthropicAPI) -> AsyncGenerator[AnthropicClient, None]:
    """Client without an API key."""
    client = make_client(test_settings, fake_api, None)
    yield client
    await client.aclose()


@pytest.fixture
def extraction_service(anthropic_client: AnthropicClient) -> BillExtractionService:
    return BillExtractionService(client=anthropic_client)


@pytest.fixture
def registry() -> BillRegistry:
    return BillRegistry()


@pytest.fixture
async def ingestion_service(
    extraction_service: BillExtractionService,
    registry: BillRegistry,
    test_settings: Settings
) -> AsyncGenerator[BillIngestionService, None]:
    service = BillIngestionService(
        extraction_service=extraction_service,
        registry=registry,
        max_concurrency=test_settings.INGESTION_MAX_CONCURRENCY,
    )
    yield service
    await service.join()


@pytest.fixture
def source_files() -> List[SourceFile]:
    return [
        SourceFile(name="bill1.pdf", media_type="application/pdf", content=PDF_BYTES),
        SourceFile(name="bill2.pdf", media_type="application/pdf", content=PDF_BYTES),
        SourceFile(name="bill3.png", media_type="image/png", content=PNG_BYTES),
    ]


@pytest.fixture
async def client(
    ingestion_service: BillIngestionService,
    extraction_service: BillExtractionService,
    registry: BillRegistry
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client for FastAPI application.
    Overrides pipeline dependencies with per-test instances backed by FakeAnthropicAPI.
    """
    app.dependency_overrides[get_extraction_service] = lambda: extraction_service
    app.dependency_overrides[get_ingestion_service] = lambda: ingestion_service
    app.dependency_overrides[get_bill_registry] = lambda: registry

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
