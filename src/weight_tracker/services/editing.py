"""Edit session state."""

from dataclasses import dataclass

from weight_tracker.domain.errors import RecordNotFoundError
from weight_tracker.domain.records import WeightRecord
from weight_tracker.services.records import RecordRepository


@dataclass
class EditSession:
    """Tracks the single record currently being edited, if any."""

    key: str | None = None

    @property
    def is_editing(self) -> bool:
        """Return True while a record is being edited."""
        return self.key is not None

    def start(self, repository: RecordRepository, date: str) -> WeightRecord:
        """Begin editing the record for ``date`` and return it for prefill."""
        record = repository.find(date)
        if record is None:
            raise RecordNotFoundError(date)
        self.key = record.date.raw
        return record

    def cancel(self) -> None:
        """Leave edit mode."""
        self.key = None
