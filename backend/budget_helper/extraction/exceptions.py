from budget_helper.common.exceptions import AppError


class FileValidationError(AppError):
    """Invalid file format, empty or oversized file"""
    pass


class ExtractionError(AppError):
    """Base exception for failures while analyzing a bill"""
    pass


class ConfigurationError(ExtractionError):
    """Anthropic API key is not configured"""

    def __init__(self, message: str = "ANTHROPIC_API_KEY is not configured"):
        self.message = message
        super().__init__(self.message)


class UploadError(ExtractionError):
    """Attachment registration failed"""
    pass


class ExtractionEndpointError(ExtractionError):
    """Completion call failed or returned an unusable body"""
    pass


class MalformedResponseError(ExtractionError):
    """
    Model reply could not be parsed as JSON after fence stripping.

    `raw_text` keeps the cleaned reply for debugging.
    """

    def __init__(self, raw_text: str, reason: str = ""):
        self.raw_text = raw_text
        self.reason = reason
        message = f"Model reply is not valid JSON: {raw_text}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
