"""Dependency container wiring for the application."""

from dataclasses import dataclass
from pathlib import Path

from supabase import create_client

from weight_tracker.adapters.file_store import JsonFileKeyValueStore
from weight_tracker.adapters.supabase_store import SupabaseKeyValueStore
from weight_tracker.config import Settings
from weight_tracker.services.chart_view import ChartView
from weight_tracker.services.editing import EditSession
from weight_tracker.services.photos import PhotoConverter
from weight_tracker.services.records import RecordRepository
from weight_tracker.services.storage import InMemoryKeyValueStore, KeyValueStore
from weight_tracker.services.submissions import RecordSubmissionService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    store: KeyValueStore
    record_repository: RecordRepository
    edit_session: EditSession
    submission_service: RecordSubmissionService
    chart_view: ChartView

    def close_resources(self) -> None:
        """Release resources held for the session."""
        self.chart_view.close()


def build_store(settings: Settings) -> KeyValueStore:
    """Create the durable store selected by the settings."""
    if settings.storage_backend == "memory":
        return InMemoryKeyValueStore()
    if settings.storage_backend == "file":
        return JsonFileKeyValueStore(Path(settings.storage_path))
    if not settings.supabase_url or not settings.supabase_service_key:
        raise ValueError("Supabase storage requires SUPABASE_URL and key")
    client = create_client(settings.supabase_url, settings.supabase_service_key)
    return SupabaseKeyValueStore(client, table=settings.supabase_table)


def build_container(
    settings: Settings | None = None, store: KeyValueStore | None = None
) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    resolved_store = store if store is not None else build_store(resolved_settings)
    record_repository = RecordRepository.load(
        resolved_store, key=resolved_settings.storage_key
    )
    edit_session = EditSession()
    submission_service = RecordSubmissionService(
        repository=record_repository,
        edit_session=edit_session,
        photo_converter=PhotoConverter(),
    )
    chart_view = ChartView(
        repository=record_repository,
        width=resolved_settings.chart_width,
        height=resolved_settings.chart_height,
        debounce_seconds=resolved_settings.chart_resize_debounce_seconds,
    )
    return AppContainer(
        settings=resolved_settings,
        store=resolved_store,
        record_repository=record_repository,
        edit_session=edit_session,
        submission_service=submission_service,
        chart_view=chart_view,
    )
