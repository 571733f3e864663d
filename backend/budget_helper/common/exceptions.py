from typing import Any


class AppError(Exception):
    """Base class for all application exceptions."""
    pass

class ResourceNotFoundError(AppError):
    """Generic error when a requested resource is not found."""
    def __init__(self, resource_name: str, identifier: Any):
        self.message = f"{resource_name} with id {identifier} not found."
        super().__init__(self.message)
