class IngestError(Exception):
    """Base class for every failure raised while loading r/place history."""

    def __init__(self, message: str, location: str | None = None):
        super().__init__(message)
        self.message = message
        self.location = location

    def __str__(self) -> str:
        if self.location:
            return f"{self.location}: {self.message}"
        return self.message


# malformed field shape (comma count, date delimiters, column count)
class FormatError(IngestError):
    pass


# non-numeric or out-of-range text where an integer was expected
class NumericParseError(IngestError):
    pass


# numeric date components that are not a real UTC instant
class InvalidCalendarDate(IngestError):
    pass


class MissingFieldError(IngestError):
    pass


class StorageError(IngestError):
    pass


# errors that belong to a single row; the skip policy may step over these
ROW_ERRORS = (FormatError, NumericParseError, InvalidCalendarDate, MissingFieldError)
