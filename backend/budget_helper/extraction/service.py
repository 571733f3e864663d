import json
import logging
import re
from typing import Any

from budget_helper.extraction.client import AnthropicClient
from budget_helper.extraction.exceptions import ConfigurationError, MalformedResponseError
from budget_helper.extraction.schemas import SourceFile

logger = logging.getLogger(__name__)


EXTRACTION_PROMPT = """You are an assistant that reads bills, receipts and invoices.

Analyze the attached document and return a single JSON object with these fields:
- "vendor": the merchant or issuer name (string)
- "amount": the total amount paid as a number, without currency symbols or thousands separators
- "date": the bill date in ISO format YYYY-MM-DD
- "category": exactly one of "operating_expense", "learning_education", "savings_investment"
- "items": a list of strings, one short description per line item

Category rules:
- "operating_expense": day-to-day living costs such as food, groceries, rent, utilities, transport, shopping, entertainment and health
- "learning_education": courses, tuition, books, training, certifications and educational subscriptions
- "savings_investment": deposits, savings transfers, insurance, pension contributions, funds, stocks and other investments

Rules:
- If a field cannot be read, set it to null (use an empty list for "items")
- Return ONLY the JSON object, without any explanation
"""

_FENCE_RE = re.compile(r"```[ \t]*(?:json)?", re.IGNORECASE)


def strip_code_fences(text: str) -> str:
    """
    Removes every markdown code fence (``` or ```json) and the surrounding
    whitespace. Text without fences only loses its outer whitespace.
    """
    return _FENCE_RE.sub("", text).strip()


def parse_extraction(text: str) -> Any:
    """
    Parsuje odpowiedź modelu do JSON-a.

    Raises:
        MalformedResponseError: jeśli po usunięciu znaczników ``` tekst nie jest poprawnym JSON-em
            albo zawiera samo `null`
    """
    cleaned = strip_code_fences(text)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise MalformedResponseError(cleaned, reason=str(e)) from e
    # `null` nie niesie żadnych danych rachunku
    if data is None:
        raise MalformedResponseError(cleaned, reason="reply is null")
    return data


class BillExtractionService:
    """
    Service for extracting structured bill data from images and PDFs using the Anthropic API.
    """

    def __init__(self, client: AnthropicClient):
        self.client = client

    @property
    def is_configured(self) -> bool:
        return bool(self.client.api_key)

    async def analyze(self, file: SourceFile) -> Any:
        """
        Główna metoda ekstrakcji danych z rachunku.

        Args:
            file: plik (obraz lub PDF) do analizy

        Returns:
            Sparsowany JSON zwrócony przez model (bez walidacji schematu)

        Raises:
            ConfigurationError: brak klucza API (bez żadnego wywołania sieciowego)
            UploadError: rejestracja attachmentu się nie powiodła
            ExtractionEndpointError: wywołanie modelu się nie powiodło
            MalformedResponseError: odpowiedź modelu nie jest poprawnym JSON-em
        """
        if not self.is_configured:
            raise ConfigurationError()

        logger.info(f"Bill extraction started: {file.name} ({file.media_type}, {file.size} bytes)")

        attachment_id = await self.client.upload_attachment(file)
        reply = await self.client.create_message(EXTRACTION_PROMPT, attachment_id, file.media_type)
        data = parse_extraction(reply)

        logger.info(f"Bill extraction completed: {file.name}")
        return data
