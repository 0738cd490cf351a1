"""
Maintenance error taxonomy.

Each class is an Error value returned inside a failed Result. The API
layer maps them to HTTP responses:

- ValidationError: missing or malformed input (client fault)
- NotFoundError: no request matches the identifier (client fault)
- ConflictError: identifier collision or concurrent modification (client fault)
- StorageError: persistence failure (server fault)
"""

from typing import Optional

from src.libs.result import Error


class ValidationError(Error):
    def __init__(self, message: str, code: str = "VALIDATION_ERROR", reason: Optional[str] = None):
        super().__init__(code, message, reason=reason)


class NotFoundError(Error):
    def __init__(self, message: str = "Maintenance request not found", code: str = "REQUEST_NOT_FOUND"):
        super().__init__(code, message)


class ConflictError(Error):
    def __init__(self, message: str, code: str = "REQUEST_ID_CONFLICT", reason: Optional[str] = None):
        super().__init__(code, message, reason=reason)


class StorageError(Error):
    def __init__(self, message: str = "Storage operation failed", reason: Optional[str] = None):
        super().__init__("STORAGE_ERROR", message, reason=reason)


def require_fields(**fields: Optional[str]) -> Optional[ValidationError]:
    """Return a ValidationError naming every blank or missing field, or None"""
    missing = [name for name, value in fields.items() if value is None or not str(value).strip()]
    if missing:
        return ValidationError(
            f"Missing required field(s): {', '.join(missing)}",
            reason=",".join(missing),
        )
    return None
