"""Chart view state with debounced re-layout."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from weight_tracker.domain.chart import ChartLayout, InsufficientData, Padding
from weight_tracker.services.chart import DEFAULT_HEIGHT, layout_chart
from weight_tracker.services.records import RecordRepository

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 0.25


@dataclass
class Debouncer:
    """Coalesces bursts of triggers into one delayed callback."""

    delay: float
    callback: Callable[[], None]
    _handle: asyncio.TimerHandle | None = field(default=None, init=False)

    @property
    def pending(self) -> bool:
        """Return True while a callback is scheduled."""
        return self._handle is not None

    def trigger(self) -> None:
        """Schedule the callback, replacing any pending one."""
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay, self._fire)

    def cancel(self) -> None:
        """Drop the pending callback, if any."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        self.callback()


@dataclass
class ChartView:
    """Keeps the chart layout in sync with records, visibility and size."""

    repository: RecordRepository
    width: float
    height: float = DEFAULT_HEIGHT
    padding: Padding | None = None
    debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS
    visible: bool = False
    layout: ChartLayout | InsufficientData | None = None
    render_count: int = 0
    _debouncer: Debouncer = field(init=False)
    _unsubscribe: Callable[[], None] = field(init=False)

    def __post_init__(self) -> None:
        self._debouncer = Debouncer(self.debounce_seconds, self._rerender)
        self._unsubscribe = self.repository.subscribe(self._on_records_changed)

    def render(self) -> ChartLayout | InsufficientData:
        """Re-derive the layout from the current records."""
        self.layout = layout_chart(
            self.repository.all(), self.width, self.height, self.padding
        )
        self.render_count += 1
        return self.layout

    def show(self, width: float | None = None) -> ChartLayout | InsufficientData:
        """Make the chart visible and lay it out immediately."""
        resolved_width = self.width if width is None else width
        layout = layout_chart(
            self.repository.all(), resolved_width, self.height, self.padding
        )
        self.width = resolved_width
        self.visible = True
        self._debouncer.cancel()
        self.layout = layout
        self.render_count += 1
        return layout

    def hide(self) -> None:
        """Hide the chart and drop any pending re-layout."""
        self.visible = False
        self._debouncer.cancel()

    def resize(self, width: float) -> None:
        """Record a new width and schedule a debounced re-layout."""
        self.width = width
        if self.visible:
            self._debouncer.trigger()

    @property
    def pending(self) -> bool:
        """Return True while a debounced re-layout is scheduled."""
        return self._debouncer.pending

    def close(self) -> None:
        """Cancel pending work and stop listening for record changes."""
        self._debouncer.cancel()
        self._unsubscribe()

    def _on_records_changed(self) -> None:
        if self.visible:
            self._rerender()

    def _rerender(self) -> None:
        try:
            self.render()
        except ValueError:
            logger.exception("Chart re-layout failed for width %s", self.width)
