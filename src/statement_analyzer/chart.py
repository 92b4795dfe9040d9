"""Horizontal bar-chart layout for extracted statement figures.

Data flow:
  1. parse_value() each extracted value
  2. drop the zeros (unparseable or genuinely zero), keep the first ten
  3. scale every bar against the largest absolute value
  4. place the zero axis flush left, or centred when any value is negative

Positive-only charts give the largest bar the whole bar area; mixed-sign
charts split the area in two, so the largest bar spans half of it.

render_svg() turns a ChartLayout into markup for the browser; export.py
draws the same geometry into the PDF.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from xml.sax.saxutils import escape, quoteattr

from statement_analyzer.models import (
    BarGeometry,
    ChartLayout,
    EmptyChart,
    ExtractedData,
    NumericDatum,
    Theme,
)
from statement_analyzer.themes import chart_palette
from statement_analyzer.valueparse import is_chartable, parse_value

MAX_ENTRIES = 10

CHART_WIDTH = 500
LABEL_WIDTH = 200
VALUE_WIDTH = 100
BAR_AREA_WIDTH = CHART_WIDTH - LABEL_WIDTH - VALUE_WIDTH
ROW_HEIGHT = 40

BAR_HEIGHT = 20
BAR_TOP = 10          # bar offset inside its row
TEXT_BASELINE = 25    # label baseline inside its row
BAR_RADIUS = 3
LABEL_GAP = 10        # metric label ends this far left of the bar area
VALUE_GAP = 5         # value label sits this far past the bar end

LABEL_MAX_CHARS = 25
LABEL_KEEP_CHARS = 22


def _as_datum(item: ExtractedData | Mapping) -> ExtractedData:
    if isinstance(item, ExtractedData):
        return item
    return ExtractedData.model_validate(item)


def truncate_label(metric: str) -> str:
    """Shorten a metric name for display only."""
    if len(metric) > LABEL_MAX_CHARS:
        return f"{metric[:LABEL_KEEP_CHARS]}..."
    return metric


def chartable_data(data: Iterable[ExtractedData | Mapping]) -> list[NumericDatum]:
    """Parse, drop zeros and keep the first MAX_ENTRIES in input order."""
    out: list[NumericDatum] = []
    for item in data:
        datum = _as_datum(item)
        numeric = parse_value(datum.value)
        if not is_chartable(numeric):
            continue
        out.append(NumericDatum(metric=datum.metric, value=datum.value, numeric_value=numeric))
        if len(out) == MAX_ENTRIES:
            break
    return out


def layout_chart(
    data: Iterable[ExtractedData | Mapping],
    theme: Theme | str = Theme.DARK,
) -> ChartLayout | EmptyChart:
    """Compute bar geometry for up to ten extracted figures.

    Returns EmptyChart when nothing is chartable.  Pure: the same input and
    theme always produce an identical layout.
    """
    theme = Theme(theme)
    dataset = chartable_data(data)
    if not dataset:
        return EmptyChart(theme=theme)

    # Zeros are already gone, so max_abs > 0
    max_abs = max(abs(d.numeric_value) for d in dataset)
    has_negative = any(d.numeric_value < 0 for d in dataset)

    if has_negative:
        zero_x = LABEL_WIDTH + BAR_AREA_WIDTH / 2
        scale_width = BAR_AREA_WIDTH / 2
    else:
        zero_x = LABEL_WIDTH
        scale_width = BAR_AREA_WIDTH

    bars: list[BarGeometry] = []
    for i, d in enumerate(dataset):
        negative = d.numeric_value < 0
        bar_width = abs(d.numeric_value) / max_abs * scale_width
        if negative:
            bar_x = zero_x - bar_width
            value_x = bar_x - VALUE_GAP
            anchor = "end"
        else:
            bar_x = zero_x
            value_x = bar_x + bar_width + VALUE_GAP
            anchor = "start"
        bars.append(BarGeometry(
            metric=d.metric,
            value=d.value,
            numeric_value=d.numeric_value,
            label=truncate_label(d.metric),
            y=i * ROW_HEIGHT,
            bar_x=bar_x,
            bar_width=bar_width,
            value_x=value_x,
            value_anchor=anchor,
            negative=negative,
        ))

    return ChartLayout(
        theme=theme,
        width=CHART_WIDTH,
        height=len(bars) * ROW_HEIGHT,
        label_width=LABEL_WIDTH,
        value_width=VALUE_WIDTH,
        bar_area_width=BAR_AREA_WIDTH,
        row_height=ROW_HEIGHT,
        zero_x=zero_x,
        max_abs=max_abs,
        has_negative=has_negative,
        bars=bars,
    )


def _num(v: float) -> str:
    """Compact coordinate formatting for SVG attributes."""
    return f"{v:.2f}".rstrip("0").rstrip(".")


def render_svg(layout: ChartLayout) -> str:
    """Render a ChartLayout as a standalone <svg> element."""
    colors = chart_palette(layout.theme)
    h = _num(layout.height)
    parts: list[str] = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="100%" height="{h}" '
        f'viewBox="0 0 {_num(layout.width)} {h}" class="data-chart">'
    ]

    if layout.has_negative:
        x = _num(layout.zero_x)
        parts.append(
            f'<line x1="{x}" y1="0" x2="{x}" y2="{h}" '
            f'stroke="{colors["subtle"]}" stroke-width="1"/>'
        )

    for bar in layout.bars:
        fill = colors["bar_negative"] if bar.negative else colors["bar_positive"]
        text_y = _num(bar.y + TEXT_BASELINE)
        parts.append("<g>")
        parts.append(
            f'<text x="{_num(layout.label_width - LABEL_GAP)}" y="{text_y}" '
            f'fill="{colors["text"]}" text-anchor="end" font-size="14">{escape(bar.label)}</text>'
        )
        parts.append(
            f'<rect x="{_num(bar.bar_x)}" y="{_num(bar.y + BAR_TOP)}" '
            f'width="{_num(bar.bar_width)}" height="{BAR_HEIGHT}" fill="{fill}" '
            f'rx="{BAR_RADIUS}" ry="{BAR_RADIUS}">'
            f"<title>{escape(f'{bar.metric}: {bar.value}')}</title></rect>"
        )
        parts.append(
            f'<text x="{_num(bar.value_x)}" y="{text_y}" fill="{colors["accent"]}" '
            f'text-anchor={quoteattr(bar.value_anchor)} font-size="12" '
            f'font-family="monospace" font-weight="bold">{escape(bar.value)}</text>'
        )
        parts.append("</g>")

    parts.append("</svg>")
    return "".join(parts)
