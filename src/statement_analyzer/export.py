"""PDF export of a finished analysis.

Builds the printable report with reportlab platypus: header, recommendation
badge, CFA summary, ratios, extracted figures, the bar chart (drawn from
the same ChartLayout geometry the browser gets) and the disclaimer.

The page is A4 multiplied by ``scale`` and everything on it scales along,
so scale=2 gives a double-resolution document.  Any failure inside the
rendering library comes out as a single ExportError.
"""

from __future__ import annotations

import io
import logging
import re
from xml.sax.saxutils import escape

from reportlab.graphics.shapes import Drawing, Group, Line, Rect, String
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_LEFT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from statement_analyzer.chart import (
    BAR_HEIGHT,
    BAR_RADIUS,
    BAR_TOP,
    LABEL_GAP,
    TEXT_BASELINE,
    layout_chart,
)
from statement_analyzer.models import ChartLayout, EmptyChart, FinancialAnalysis, Theme
from statement_analyzer.themes import card_palette, chart_palette, recommendation_colors

log = logging.getLogger(__name__)

PAGE_WIDTH, PAGE_HEIGHT = A4


class ExportError(Exception):
    """The report could not be rendered to PDF."""


def report_filename(company_name: str) -> str:
    """financial_report_<name>.pdf with every non-alphanumeric char as '_'."""
    safe = re.sub(r"[^a-z0-9]", "_", company_name, flags=re.IGNORECASE | re.ASCII).lower()
    return f"financial_report_{safe}.pdf"


def _styles(scale: float, text_color: str) -> dict[str, ParagraphStyle]:
    base = getSampleStyleSheet()
    ink = colors.HexColor(text_color)

    def style(name: str, parent: str, size: float, **kw) -> ParagraphStyle:
        return ParagraphStyle(
            name,
            parent=base[parent],
            fontSize=size * scale,
            leading=size * 1.35 * scale,
            textColor=kw.pop("textColor", ink),
            **kw,
        )

    return {
        "title": style("ReportTitle", "Title", 20, alignment=TA_LEFT, spaceAfter=4 * scale),
        "subtitle": style("ReportSubtitle", "Heading3", 12, textColor=colors.HexColor("#007A7A")),
        "section": style("Section", "Heading2", 14, spaceBefore=12 * scale, spaceAfter=6 * scale),
        "label": style("Label", "Heading4", 10, spaceBefore=4 * scale),
        "body": style("Body", "BodyText", 10),
        "cell": style("Cell", "BodyText", 9),
        "badge": style("Badge", "BodyText", 12, alignment=TA_CENTER, fontName="Helvetica-Bold"),
        "small": style("Small", "BodyText", 8, textColor=colors.HexColor("#6b7280")),
    }


def _p(text: str, style: ParagraphStyle) -> Paragraph:
    return Paragraph(escape(text or ""), style)


def chart_drawing(layout: ChartLayout, width: float) -> Drawing:
    """Draw a ChartLayout, scaled to ``width`` points across."""
    palette = chart_palette(layout.theme)
    factor = width / layout.width
    h = layout.height

    # SVG geometry has y growing downwards; reportlab's grows upwards
    g = Group()
    if layout.has_negative:
        g.add(Line(layout.zero_x, 0, layout.zero_x, h,
                   strokeColor=colors.HexColor(palette["subtle"]), strokeWidth=1))

    for bar in layout.bars:
        baseline = h - (bar.y + TEXT_BASELINE)
        fill = palette["bar_negative"] if bar.negative else palette["bar_positive"]
        g.add(String(layout.label_width - LABEL_GAP, baseline, bar.label,
                     fontName="Helvetica", fontSize=14,
                     fillColor=colors.HexColor(palette["text"]), textAnchor="end"))
        g.add(Rect(bar.bar_x, h - (bar.y + BAR_TOP + BAR_HEIGHT), bar.bar_width, BAR_HEIGHT,
                   rx=BAR_RADIUS, ry=BAR_RADIUS,
                   fillColor=colors.HexColor(fill), strokeColor=None))
        g.add(String(bar.value_x, baseline, bar.value,
                     fontName="Courier-Bold", fontSize=12,
                     fillColor=colors.HexColor(palette["accent"]), textAnchor=bar.value_anchor))

    g.scale(factor, factor)
    drawing = Drawing(layout.width * factor, h * factor)
    drawing.add(g)
    return drawing


def _table_style(scale: float, palette: dict[str, str]) -> TableStyle:
    return TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor(palette["card"])),
        ("LINEBELOW", (0, 0), (-1, 0), 1.5 * scale, colors.HexColor(palette["border"])),
        ("LINEBELOW", (0, 1), (-1, -1), 0.5 * scale, colors.HexColor(palette["border"])),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ("TOPPADDING", (0, 0), (-1, -1), 4 * scale),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 4 * scale),
    ])


def _build_story(
    analysis: FinancialAnalysis,
    styles: dict[str, ParagraphStyle],
    frame_width: float,
    scale: float,
    theme: Theme,
) -> list:
    cards = card_palette(theme)
    story: list = []

    story.append(_p(f"Financial Report for {analysis.company_name}", styles["title"]))
    story.append(_p(analysis.statement_type, styles["subtitle"]))
    story.append(Spacer(1, 6 * scale))

    badge_bg, badge_fg = recommendation_colors(analysis.recommendation)
    badge_style = ParagraphStyle("BadgeInk", parent=styles["badge"], textColor=colors.HexColor(badge_fg))
    badge = Table(
        [[_p("Recommendation", styles["label"]), _p(analysis.recommendation.value, badge_style)]],
        colWidths=[frame_width * 0.3, frame_width * 0.2],
        hAlign="LEFT",
    )
    badge.setStyle(TableStyle([
        ("BACKGROUND", (1, 0), (1, 0), colors.HexColor(badge_bg)),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
    ]))
    story.append(badge)

    story.append(_p("CFA Summary", styles["section"]))
    for heading, text in (
        ("Strengths", analysis.summary.strengths),
        ("Weaknesses", analysis.summary.weaknesses),
        ("Outlook", analysis.summary.outlook),
    ):
        story.append(_p(heading, styles["label"]))
        story.append(_p(text, styles["body"]))

    story.append(_p("Key Financial Ratios", styles["section"]))
    if analysis.ratios:
        rows = [[_p("Ratio", styles["label"]), _p("Value", styles["label"]), _p("Interpretation", styles["label"])]]
        for r in analysis.ratios:
            rows.append([_p(r.name, styles["cell"]), _p(r.value, styles["cell"]), _p(r.interpretation, styles["cell"])])
        table = Table(rows, colWidths=[frame_width * 0.28, frame_width * 0.17, frame_width * 0.55], repeatRows=1)
        table.setStyle(_table_style(scale, cards))
        story.append(table)
    else:
        story.append(_p("No ratios reported.", styles["small"]))

    story.append(_p("Extracted Data", styles["section"]))
    if analysis.extracted_data:
        rows = [[_p("Metric", styles["label"]), _p("Value", styles["label"])]]
        for d in analysis.extracted_data:
            rows.append([_p(d.metric, styles["cell"]), _p(d.value, styles["cell"])])
        table = Table(rows, colWidths=[frame_width * 0.6, frame_width * 0.4], repeatRows=1)
        table.setStyle(_table_style(scale, cards))
        story.append(table)
    else:
        story.append(_p("No figures extracted.", styles["small"]))

    story.append(_p("Visual Insights", styles["section"]))
    layout = layout_chart(analysis.extracted_data, theme)
    if isinstance(layout, EmptyChart):
        story.append(_p(layout.message, styles["small"]))
    else:
        story.append(chart_drawing(layout, frame_width))

    story.append(Spacer(1, 12 * scale))
    story.append(_p("Disclaimer", styles["label"]))
    story.append(_p(analysis.cfa_disclaimer, styles["small"]))
    return story


def render_report_pdf(
    analysis: FinancialAnalysis,
    *,
    scale: float = 2.0,
    background: str = "#ffffff",
    theme: Theme | str = Theme.LIGHT,
) -> bytes:
    """Render the analysis report and return the PDF bytes.

    Raises:
        ExportError: bad scale/colour/theme, or any reportlab failure.
    """
    if scale <= 0:
        raise ExportError(f"Scale must be positive, got {scale}")

    try:
        theme = Theme(theme)
        page_size = (PAGE_WIDTH * scale, PAGE_HEIGHT * scale)
        margin = 0.6 * inch * scale
        bg = colors.HexColor(background)

        buf = io.BytesIO()
        doc = SimpleDocTemplate(
            buf,
            pagesize=page_size,
            leftMargin=margin, rightMargin=margin,
            topMargin=margin, bottomMargin=margin,
            title=f"Financial Report - {analysis.company_name}",
            author="Statement Analyzer",
        )

        def paint_background(canv, _doc):
            canv.saveState()
            canv.setFillColor(bg)
            canv.rect(0, 0, page_size[0], page_size[1], stroke=0, fill=1)
            canv.restoreState()

        styles = _styles(scale, chart_palette(theme)["text"])
        story = _build_story(analysis, styles, doc.width, scale, theme)
        doc.build(story, onFirstPage=paint_background, onLaterPages=paint_background)
    except Exception as exc:
        log.exception("Failed to generate PDF for %s", analysis.company_name)
        raise ExportError("Failed to generate PDF") from exc

    pdf = buf.getvalue()
    log.info("Rendered PDF for %s (%d bytes)", analysis.company_name, len(pdf))
    return pdf
