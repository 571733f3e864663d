from pydantic import BaseModel, ConfigDict

class AppBaseModel(BaseModel):
    """
    Global base model for the application.
    Centralizes Pydantic configuration (strict mode, stripping, etc.).
    """
    model_config = ConfigDict(
        strict=True,                # No implicit type coercion (ex: "1" != 1)
        str_strip_whitespace=True,  # Auto-strip whitespace from strings
        validate_assignment=True,   # Validate values even when setting attributes after creation
        frozen=False                # Allow mutation (default)
    )


class ResponseModel(AppBaseModel):
    """
    Base for response schemas.
    FastAPI re-validates the JSON-mode dump of the returned model (datetimes and
    enums arrive as strings), so coercion has to stay enabled here.
    """
    model_config = ConfigDict(strict=False)
