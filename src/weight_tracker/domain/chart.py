"""Chart layout description models."""

from typing import Literal

from pydantic import BaseModel, Field

INSUFFICIENT_DATA_MESSAGE = "The chart appears once there are at least two records."


class Padding(BaseModel):
    """Space reserved around the plotting area."""

    top: float = 20
    right: float = 20
    bottom: float = 40
    left: float = 40


class Point(BaseModel):
    """A scaled data point."""

    x: float
    y: float
    date: str
    weight: float


class Line(BaseModel):
    """A straight line segment."""

    x1: float
    y1: float
    x2: float
    y2: float


class Label(BaseModel):
    """A positioned text node."""

    x: float
    y: float
    text: str
    anchor: Literal["start", "middle", "end"] = "middle"
    baseline: Literal["auto", "middle"] = "auto"


class Marker(BaseModel):
    """A filled circular point marker."""

    cx: float
    cy: float
    r: float = 4


class ChartLayout(BaseModel):
    """Self-contained drawing description for a single-series line chart."""

    kind: Literal["chart"] = "chart"
    width: float
    height: float
    padding: Padding
    y_min: int
    y_max: int
    gridlines: list[Line]
    y_ticks: list[Label]
    x_labels: list[Label]
    axes: list[Line]
    polyline: list[Point]
    markers: list[Marker]


class InsufficientData(BaseModel):
    """Layout state for fewer than two plottable records."""

    kind: Literal["insufficient_data"] = "insufficient_data"
    valid_points: int = Field(ge=0)
    message: str = INSUFFICIENT_DATA_MESSAGE
