from fastapi import status

from src.domain.errors import ConflictError, NotFoundError, ValidationError
from src.libs.result import Error


class ClientError(Exception):
    """A caller mistake, rendered with its own status code and the error code"""

    def __init__(self, base_error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)


class ServerError(Exception):
    """A storage or internal failure, rendered as a 500 without the reason"""

    def __init__(self, base_error: Error):
        self.base_error = base_error
        super().__init__(base_error.message)


ERROR_STATUS_CODES = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
)


def raise_for_error(error: Error):
    """Map a use case error onto the HTTP error the handlers render"""
    for error_type, status_code in ERROR_STATUS_CODES:
        if isinstance(error, error_type):
            raise ClientError(error, status_code=status_code)
    raise ServerError(error)
