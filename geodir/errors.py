"""
Directory error taxonomy.

Services raise these; the HTTP layer maps them to status codes in one place
(see geodir.main.register_error_handlers):

  ValidationError  → 400   malformed id, short search text, unknown type
  NotFound         → 404   id-scoped lookup with no live row
  StoreError       → 500   anything the database reports, message passed through
"""


class GeoDirError(Exception):
    """Base class for all directory errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(GeoDirError):
    status_code = 400


class InvalidFilterError(ValidationError):
    """A list filter (level, parent_id, id) is not a non-negative integer."""


class InvalidNameError(ValidationError):
    """A path segment is empty or contains the path delimiter."""


class NotFound(GeoDirError):
    status_code = 404

    def __init__(self, message: str = "Not found"):
        super().__init__(message)


class StoreError(GeoDirError):
    status_code = 500


def parse_id(value: str | int | None, label: str = "id") -> int:
    """
    Parse a path/query identifier as a non-negative integer.

    Raises InvalidFilterError with "Invalid <label>" on anything else.
    """
    if isinstance(value, int) and not isinstance(value, bool):
        if value >= 0:
            return value
        raise InvalidFilterError(f"Invalid {label}")
    text = (value or "").strip()
    if not text.isdigit() or not text.isascii():
        raise InvalidFilterError(f"Invalid {label}")
    return int(text)
