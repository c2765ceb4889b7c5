"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, File, Form, HTTPException, Request, UploadFile, status
from fastapi.responses import PlainTextResponse, Response

from weight_tracker.api.models import EditSessionRequest, ViewportRequest
from weight_tracker.app_logging import configure_logging
from weight_tracker.containers import AppContainer
from weight_tracker.domain.chart import ChartLayout, InsufficientData
from weight_tracker.domain.errors import (
    ConversionError,
    DuplicateDateError,
    MissingFieldError,
    RecordNotFoundError,
)
from weight_tracker.domain.records import WeightRecord
from weight_tracker.services.chart import layout_chart
from weight_tracker.services.svg import render_svg
from weight_tracker.services.views import (
    photos_by_date_descending,
    records_by_date_descending,
)

SVG_MEDIA_TYPE = "image/svg+xml"
HTTP_422_UNPROCESSABLE = 422


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/records")
    async def list_records(request: Request) -> dict[str, object]:
        """Return all records, newest first."""
        state_container: AppContainer = request.app.state.container
        records = records_by_date_descending(state_container.record_repository.all())
        return {"records": [_record_summary(record) for record in records]}

    @app.get("/records/{date}")
    async def get_record(date: str, request: Request) -> dict[str, object]:
        """Return a single record by date."""
        state_container: AppContainer = request.app.state.container
        record = state_container.record_repository.find(date)
        if record is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return _record_detail(record)

    @app.post("/records", status_code=status.HTTP_201_CREATED)
    async def submit_record(
        request: Request,
        date: str = Form(...),
        weight: str = Form(...),
        photo: UploadFile | None = File(default=None),
    ) -> dict[str, object]:
        """Add a record, or update the one being edited."""
        state_container: AppContainer = request.app.state.container
        try:
            result = await state_container.submission_service.submit(
                date, weight, photo
            )
        except MissingFieldError as exc:
            raise HTTPException(
                status_code=HTTP_422_UNPROCESSABLE, detail=str(exc)
            ) from exc
        except ConversionError as exc:
            raise HTTPException(
                status_code=HTTP_422_UNPROCESSABLE, detail=str(exc)
            ) from exc
        except DuplicateDateError as exc:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT, detail=str(exc)
            ) from exc
        if result.warning:
            logger.warning("Record for %s kept in memory only", date)
        return {
            "status": "ok",
            "created": result.outcome.created,
            "edited": result.edited,
            "warning": result.warning,
        }

    @app.get("/edit-session")
    async def get_edit_session(request: Request) -> dict[str, object]:
        """Return the date currently being edited."""
        state_container: AppContainer = request.app.state.container
        return {"editing": state_container.edit_session.key}

    @app.post("/edit-session")
    async def start_edit_session(
        payload: EditSessionRequest, request: Request
    ) -> dict[str, object]:
        """Enter edit mode for a record and return its current values."""
        state_container: AppContainer = request.app.state.container
        try:
            record = state_container.edit_session.start(
                state_container.record_repository, payload.date
            )
        except RecordNotFoundError as exc:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
            ) from exc
        return {"editing": record.date.raw, "record": _record_summary(record)}

    @app.delete("/edit-session")
    async def cancel_edit_session(request: Request) -> dict[str, object]:
        """Leave edit mode."""
        state_container: AppContainer = request.app.state.container
        state_container.edit_session.cancel()
        return {"editing": None}

    @app.get("/photos")
    async def list_photos(request: Request) -> dict[str, object]:
        """Return gallery entries, newest first."""
        state_container: AppContainer = request.app.state.container
        records = photos_by_date_descending(state_container.record_repository.all())
        return {
            "photos": [
                {"date": record.date.raw, "image_data_url": record.image_data_url}
                for record in records
            ]
        }

    @app.get("/chart")
    async def chart(request: Request, width: float | None = None) -> dict[str, object]:
        """Return the chart layout for the given canvas width."""
        return _chart_layout(request.app.state.container, width).model_dump()

    @app.get("/chart.svg")
    async def chart_svg(request: Request, width: float | None = None) -> Response:
        """Return the chart as an SVG document, or a placeholder message."""
        layout = _chart_layout(request.app.state.container, width)
        if isinstance(layout, InsufficientData):
            return PlainTextResponse(layout.message)
        return Response(content=render_svg(layout), media_type=SVG_MEDIA_TYPE)

    @app.put("/chart/viewport")
    async def chart_viewport(
        payload: ViewportRequest, request: Request
    ) -> dict[str, object]:
        """Update chart visibility and size; resizes are applied debounced."""
        state_container: AppContainer = request.app.state.container
        chart_view = state_container.chart_view
        if not payload.visible:
            chart_view.hide()
            chart_view.width = payload.width
        elif chart_view.visible:
            chart_view.resize(payload.width)
        else:
            try:
                chart_view.show(payload.width)
            except ValueError as exc:
                raise HTTPException(
                    status_code=HTTP_422_UNPROCESSABLE,
                    detail=str(exc),
                ) from exc
        layout = chart_view.layout
        return {
            "visible": chart_view.visible,
            "width": chart_view.width,
            "pending": chart_view.pending,
            "layout": layout.model_dump() if layout is not None else None,
        }

    return app


def _chart_layout(
    container: AppContainer, width: float | None
) -> ChartLayout | InsufficientData:
    resolved_width = width if width is not None else container.chart_view.width
    try:
        return layout_chart(
            container.record_repository.all(),
            resolved_width,
            container.settings.chart_height,
        )
    except ValueError as exc:
        raise HTTPException(
            status_code=HTTP_422_UNPROCESSABLE, detail=str(exc)
        ) from exc


def _record_summary(record: WeightRecord) -> dict[str, object]:
    return {
        "date": record.date.raw,
        "weight": record.weight,
        "has_photo": record.has_photo,
    }


def _record_detail(record: WeightRecord) -> dict[str, object]:
    return {**_record_summary(record), "image_data_url": record.image_data_url}
