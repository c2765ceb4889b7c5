"""Domain errors for the weight tracker."""


class WeightTrackerError(Exception):
    """Base class for weight tracker errors."""


class DuplicateDateError(WeightTrackerError):
    """Raised when an edit would rename a record onto an existing date."""

    def __init__(self, date: str) -> None:
        super().__init__(f"A record for {date} already exists")
        self.date = date


class RecordNotFoundError(WeightTrackerError):
    """Raised when no record exists for the requested date."""

    def __init__(self, date: str) -> None:
        super().__init__(f"No record for {date}")
        self.date = date


class MissingFieldError(WeightTrackerError):
    """Raised when a required submission field is blank."""

    def __init__(self, field: str) -> None:
        super().__init__(f"{field} is required")
        self.field = field


class ConversionError(WeightTrackerError):
    """Raised when an uploaded photo cannot be converted to text."""


class StorageError(WeightTrackerError):
    """Raised when the durable store rejects a write."""
