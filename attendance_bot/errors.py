class AttendanceError(Exception):
    """Base exception for command input the bot cannot turn into a record."""


class ArgumentError(AttendanceError):
    """Raised when a command has the wrong shape, e.g. a date without a time."""

    def __init__(self, message: str = "Argument error.") -> None:
        super().__init__(message)


class DateFormatError(AttendanceError):
    """Raised when a date or month fragment cannot be parsed."""

    def __init__(self, text: str) -> None:
        super().__init__(f"Date parse failed: {text}")
        self.text = text


class TimeFormatError(AttendanceError):
    """Raised when a time fragment matches none of the accepted shapes."""

    def __init__(self, text: str) -> None:
        super().__init__(f"Time parse failed: {text}")
        self.text = text


class TimeRangeError(AttendanceError):
    """Raised when a parsed time falls outside its day."""

    def __init__(self, text: str) -> None:
        super().__init__(f"Time format error: {text} is outside the day")
        self.text = text
