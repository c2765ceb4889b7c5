"""Line chart layout for weight records."""

import math
from collections.abc import Iterable
from dataclasses import dataclass

from weight_tracker.domain.chart import (
    ChartLayout,
    InsufficientData,
    Label,
    Line,
    Marker,
    Padding,
    Point,
)
from weight_tracker.domain.records import WeightRecord

DEFAULT_HEIGHT = 300
MIN_POINTS = 2
RANGE_PADDING = 0.2
MAX_DATE_LABELS = 10
TICK_LABEL_OFFSET = 8
DATE_LABEL_OFFSET = 15
MARKER_RADIUS = 4


@dataclass(frozen=True)
class _Sample:
    record: WeightRecord
    weight: float


def layout_chart(
    records: Iterable[WeightRecord],
    width: float,
    height: float = DEFAULT_HEIGHT,
    padding: Padding | None = None,
) -> ChartLayout | InsufficientData:
    """Lay out a weight-over-time line chart for the given canvas size.

    Records whose weight does not parse are skipped. Points are spaced evenly
    by index in ascending date order, not proportionally to the dates.
    """
    if not (math.isfinite(width) and math.isfinite(height)):
        raise ValueError(f"Canvas {width}x{height} must have finite dimensions")
    pad = padding or Padding()
    chart_width = width - pad.left - pad.right
    chart_height = height - pad.top - pad.bottom
    if chart_width <= 0 or chart_height <= 0:
        raise ValueError(f"Canvas {width}x{height} leaves no room for the chart")

    samples = _plottable_samples(records)
    if len(samples) < MIN_POINTS:
        return InsufficientData(valid_points=len(samples))

    y_min, y_max = _vertical_bounds([sample.weight for sample in samples])
    count = len(samples)

    def x_scale(index: int) -> float:
        return pad.left + index / (count - 1) * chart_width

    def y_scale(weight: float) -> float:
        share = (weight - y_min) / (y_max - y_min)
        return pad.top + chart_height - share * chart_height

    gridlines: list[Line] = []
    y_ticks: list[Label] = []
    # One tick per integer unit regardless of span.
    for value in range(y_min, y_max + 1):
        y = y_scale(value)
        gridlines.append(Line(x1=pad.left, y1=y, x2=pad.left + chart_width, y2=y))
        y_ticks.append(
            Label(
                x=pad.left - TICK_LABEL_OFFSET,
                y=y,
                text=str(value),
                anchor="end",
                baseline="middle",
            )
        )

    label_y = height - pad.bottom + DATE_LABEL_OFFSET
    x_labels = [
        Label(x=x_scale(index), y=label_y, text=samples[index].record.date.month_day())
        for index in date_label_indices(count)
    ]

    bottom = pad.top + chart_height
    axes = [
        Line(x1=pad.left, y1=pad.top, x2=pad.left, y2=bottom),
        Line(x1=pad.left, y1=bottom, x2=pad.left + chart_width, y2=bottom),
    ]

    points = [
        Point(
            x=x_scale(index),
            y=y_scale(sample.weight),
            date=sample.record.date.raw,
            weight=sample.weight,
        )
        for index, sample in enumerate(samples)
    ]
    markers = [Marker(cx=point.x, cy=point.y, r=MARKER_RADIUS) for point in points]

    return ChartLayout(
        width=width,
        height=height,
        padding=pad,
        y_min=y_min,
        y_max=y_max,
        gridlines=gridlines,
        y_ticks=y_ticks,
        x_labels=x_labels,
        axes=axes,
        polyline=points,
        markers=markers,
    )


def date_label_indices(count: int) -> list[int]:
    """Return the point indices that get a date label."""
    if count <= MAX_DATE_LABELS:
        return list(range(count))
    step = math.ceil(count / MAX_DATE_LABELS)
    return list(range(0, count, step))


def _plottable_samples(records: Iterable[WeightRecord]) -> list[_Sample]:
    samples = []
    for record in records:
        weight = record.weight_value()
        if weight is not None:
            samples.append(_Sample(record=record, weight=weight))
    # sorted() is stable, so equal dates keep insertion order.
    return sorted(samples, key=lambda sample: sample.record.date.sort_key)


def _vertical_bounds(weights: list[float]) -> tuple[int, int]:
    min_weight = min(weights)
    max_weight = max(weights)
    weight_range = max_weight - min_weight
    y_min = max(0, math.floor(min_weight - weight_range * RANGE_PADDING))
    y_max = math.ceil(max_weight + weight_range * RANGE_PADDING)
    if y_max <= y_min:
        y_max = y_min + 1
    return y_min, y_max
