"""
Result type for use case outcomes.

Use cases never raise for expected business failures. They return
Return.ok(value) or Return.err(Error(...)) and let the API layer decide
how the error is rendered.
"""

from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class Error:
    """Business error carried by a failed Result"""

    def __init__(self, code: str, message: str, reason: Optional[str] = None):
        self.code = code
        self.message = message
        self.reason = reason

    def __eq__(self, other):
        if not isinstance(other, Error):
            return NotImplemented
        return (self.code, self.message, self.reason) == (
            other.code,
            other.message,
            other.reason,
        )

    def __repr__(self):
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class Result(Generic[T]):
    def __init__(self, value: Optional[T] = None, error: Optional[Error] = None):
        self._value = value
        self._error = error

    def is_ok(self) -> bool:
        return self._error is None

    def is_err(self) -> bool:
        return self._error is not None

    @property
    def value(self) -> T:
        if self._error is not None:
            raise ValueError(f"Result is an error: {self._error!r}")
        return self._value

    @property
    def error(self) -> Error:
        if self._error is None:
            raise ValueError("Result is not an error")
        return self._error


class Return:
    @staticmethod
    def ok(value: T = None) -> Result[T]:
        return Result(value=value)

    @staticmethod
    def err(error: Error) -> Result:
        return Result(error=error)
