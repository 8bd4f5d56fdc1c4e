from typing import Optional


class SearchRequestError(Exception):
    """Base class for errors caused by a malformed search request.

    Every subclass is a client-input error; ``status_code`` lets a transport
    layer map it to a response without knowing the concrete class.
    """

    status_code: int = 400

    def __init__(self, message: str = "The search request is invalid."):
        super().__init__(message)


class KeyNotFoundError(SearchRequestError, KeyError):
    """Raised when a filter or sort key does not resolve to a field of the schema."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"{key} is invalid Key")

    def __str__(self) -> str:
        # KeyError would otherwise render the message with quotes around it.
        return self.args[0]


class InvalidDataTypeError(SearchRequestError, ValueError):
    """Raised when a value cannot be parsed under the declared field type."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or "Invalid data type")
