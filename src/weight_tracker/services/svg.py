"""SVG rendering of chart layouts."""

from xml.sax.saxutils import escape, quoteattr

from weight_tracker.domain.chart import ChartLayout, Label, Line

GRID_COLOR = "#eee"
AXIS_COLOR = "#ccc"
TEXT_COLOR = "#666"
SERIES_COLOR = "#4a90e2"


def render_svg(
    layout: ChartLayout,
    series_color: str = SERIES_COLOR,
    title: str = "Weight over time",
) -> str:
    """Render a chart layout as a standalone SVG document."""
    parts = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{_num(layout.width)}" '
        f'height="{_num(layout.height)}" aria-label={quoteattr(title)}>'
    ]
    for line in layout.gridlines:
        parts.append(_line(line, GRID_COLOR))
    for label in layout.y_ticks:
        parts.append(_text(label))
    for label in layout.x_labels:
        parts.append(_text(label))
    for line in layout.axes:
        parts.append(_line(line, AXIS_COLOR))

    points = " ".join(f"{_num(p.x)},{_num(p.y)}" for p in layout.polyline)
    parts.append(
        f'<polyline points="{points}" fill="none" '
        f'stroke={quoteattr(series_color)} stroke-width="2" />'
    )
    for marker in layout.markers:
        parts.append(
            f'<circle cx="{_num(marker.cx)}" cy="{_num(marker.cy)}" '
            f'r="{_num(marker.r)}" fill={quoteattr(series_color)} />'
        )
    parts.append("</svg>")
    return "".join(parts)


def _line(line: Line, stroke: str) -> str:
    return (
        f'<line x1="{_num(line.x1)}" y1="{_num(line.y1)}" '
        f'x2="{_num(line.x2)}" y2="{_num(line.y2)}" stroke="{stroke}" />'
    )


def _text(label: Label) -> str:
    baseline = (
        ' alignment-baseline="middle"' if label.baseline == "middle" else ""
    )
    return (
        f'<text x="{_num(label.x)}" y="{_num(label.y)}" '
        f'text-anchor="{label.anchor}"{baseline} fill="{TEXT_COLOR}">'
        f"{escape(label.text)}</text>"
    )


def _num(value: float) -> str:
    return f"{value:.2f}".rstrip("0").rstrip(".")
