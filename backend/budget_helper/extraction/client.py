import logging
from typing import Any, Optional

import httpx

from budget_helper.extraction.exceptions import UploadError, ExtractionEndpointError
from budget_helper.extraction.schemas import SourceFile

logger = logging.getLogger(__name__)


def _as_identifier(value: Any) -> Optional[str]:
    # Liczbowe id zamieniamy na string, inne typy odrzucamy
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str) and value:
        return value
    return None


def _attachment_id(payload: Any) -> Optional[str]:
    """
    Reads the attachment identifier from the upload response.

    The API has been seen returning both `{"attachment": {"id": ...}}` and a
    bare `{"id": ...}`; both shapes are accepted. Integer ids are returned as
    strings, any other non-string id counts as missing.
    """
    if not isinstance(payload, dict):
        return None
    attachment = payload.get("attachment")
    if isinstance(attachment, dict):
        attachment_id = _as_identifier(attachment.get("id"))
        if attachment_id:
            return attachment_id
    return _as_identifier(payload.get("id"))


class AnthropicClient:
    """
    Minimal async client for the two Anthropic endpoints used by bill extraction.
    """

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str,
        version: str,
        model: str,
        max_tokens: int,
        timeout: float = 60,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.version = version
        self.model = model
        self.max_tokens = max_tokens
        self.timeout = timeout
        self._transport = transport
        self._http: Optional[httpx.AsyncClient] = None

    def _get_http(self) -> httpx.AsyncClient:
        if self._http is None or self._http.is_closed:
            self._http = httpx.AsyncClient(timeout=self.timeout, transport=self._transport)
        return self._http

    async def aclose(self) -> None:
        if self._http is not None:
            await self._http.aclose()
            self._http = None

    async def upload_attachment(self, file: SourceFile) -> str:
        """
        Rejestruje plik jako attachment i zwraca jego ID.

        Raises:
            UploadError: błąd transportu, status inny niż 2xx lub brak ID w odpowiedzi
        """
        try:
            response = await self._get_http().post(
                f"{self.base_url}/attachments",
                headers={"x-api-key": self.api_key},
                files={"file": (file.name, file.content, file.media_type)},
            )
        except httpx.HTTPError as e:
            raise UploadError(f"Attachment upload failed: {e}") from e

        if not response.is_success:
            raise UploadError(f"Attachment upload failed: {response.text}")

        try:
            payload = response.json()
        except ValueError as e:
            raise UploadError(f"Attachment upload returned invalid JSON: {response.text}") from e

        attachment_id = _attachment_id(payload)
        if not attachment_id:
            raise UploadError("Attachment upload response did not contain an attachment id")

        logger.debug(f"Registered attachment {attachment_id} for {file.name}")
        return attachment_id

    async def create_message(self, prompt: str, attachment_id: str, media_type: str) -> str:
        """
        Sends the extraction prompt with the attachment reference and returns
        the text of the first content block of the reply.

        Raises:
            ExtractionEndpointError: transport error, non-2xx status or a reply without text
        """
        body = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": prompt},
                        {"type": "attachment", "attachment": {"id": attachment_id, "type": media_type}},
                    ],
                }
            ],
        }
        try:
            response = await self._get_http().post(
                f"{self.base_url}/messages",
                headers={
                    "x-api-key": self.api_key,
                    "anthropic-version": self.version,
                    "content-type": "application/json",
                },
                json=body,
            )
        except httpx.HTTPError as e:
            raise ExtractionEndpointError(f"Anthropic API error: {e}") from e

        if not response.is_success:
            raise ExtractionEndpointError(f"Anthropic API error: {response.text}")

        try:
            text = response.json()["content"][0]["text"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ExtractionEndpointError(f"Anthropic API returned an unexpected body: {response.text}") from e

        if not isinstance(text, str):
            raise ExtractionEndpointError(f"Anthropic API returned an unexpected body: {response.text}")

        return text
