"""Add/edit form submission flow."""

import logging
from dataclasses import dataclass

from weight_tracker.domain.errors import MissingFieldError
from weight_tracker.services.editing import EditSession
from weight_tracker.services.photos import PhotoConverter, PhotoUpload
from weight_tracker.services.records import RecordRepository, UpsertOutcome

logger = logging.getLogger(__name__)

STORAGE_WARNING = "The record was kept but could not be saved. Storage may be full."


@dataclass(frozen=True)
class SubmissionResult:
    """Outcome of a record submission."""

    outcome: UpsertOutcome
    edited: bool

    @property
    def warning(self) -> str | None:
        """Return a user-facing warning when persistence failed."""
        if self.outcome.persisted:
            return None
        return STORAGE_WARNING


@dataclass
class RecordSubmissionService:
    """Applies a submitted record in add or edit mode."""

    repository: RecordRepository
    edit_session: EditSession
    photo_converter: PhotoConverter

    async def submit(
        self, date: str, weight: str, photo: PhotoUpload | None = None
    ) -> SubmissionResult:
        """Convert the photo, upsert the record and leave edit mode.

        ConversionError and DuplicateDateError propagate with no change made;
        a duplicate keeps the edit session open so the user can pick another
        date.
        """
        if not date.strip():
            raise MissingFieldError("date")
        if not weight.strip():
            raise MissingFieldError("weight")

        image_data_url = await self.photo_converter.to_text(photo)
        editing_key = self.edit_session.key
        outcome = self.repository.upsert(
            date, weight, photo=image_data_url, editing_key=editing_key
        )
        self.edit_session.cancel()
        logger.info(
            "Saved weight record for %s (edited=%s, created=%s)",
            date,
            editing_key is not None,
            outcome.created,
        )
        return SubmissionResult(outcome=outcome, edited=editing_key is not None)
