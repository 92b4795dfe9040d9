"""Pydantic models for the analysis record, chart geometry and API bodies."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


class _Wire(BaseModel):
    """camelCase on the wire, snake_case in Python; both accepted on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Analysis record (what the language model returns)
# ---------------------------------------------------------------------------

class Recommendation(str, Enum):
    BUY = "Buy"
    HOLD = "Hold"
    SELL = "Sell"
    NA = "N/A"


class ExtractedData(_Wire):
    """One metric/value pair exactly as the model wrote it."""

    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

    metric: str = ""
    value: str = ""

    @field_validator("metric", "value", mode="before")
    @classmethod
    def blank_non_text(cls, v):
        # null, lists, booleans etc. become "": the row is kept but never charted
        if isinstance(v, bool) or not isinstance(v, (str, int, float)):
            return ""
        return v


class FinancialRatio(_Wire):
    name: str
    value: str
    interpretation: str = ""

    model_config = ConfigDict(coerce_numbers_to_str=True)


class AnalysisSummary(_Wire):
    strengths: str = ""
    weaknesses: str = ""
    outlook: str = ""


class FinancialAnalysis(_Wire):
    """Full structured analysis of one financial statement."""

    company_name: str = ""
    statement_type: str = ""
    extracted_data: list[ExtractedData] = []
    ratios: list[FinancialRatio] = []
    summary: AnalysisSummary = AnalysisSummary()
    recommendation: Recommendation = Recommendation.NA
    cfa_disclaimer: str = ""

    # Anything other than Buy / Hold / Sell is shown as N/A
    @field_validator("recommendation", mode="before")
    @classmethod
    def normalize_recommendation(cls, v):
        if isinstance(v, Recommendation):
            return v
        if v in (Recommendation.BUY.value, Recommendation.HOLD.value, Recommendation.SELL.value):
            return v
        return Recommendation.NA


# ---------------------------------------------------------------------------
# Chart geometry
# ---------------------------------------------------------------------------

class Theme(str, Enum):
    DARK = "dark"
    LIGHT = "light"


class NumericDatum(BaseModel):
    """ExtractedData plus its parsed magnitude (0.0 = not chartable)."""

    model_config = ConfigDict(frozen=True)

    metric: str
    value: str
    numeric_value: float


class BarGeometry(BaseModel):
    """Placement of one row of the horizontal bar chart."""

    model_config = ConfigDict(frozen=True)

    metric: str
    value: str
    numeric_value: float
    label: str                   # display text, possibly truncated
    y: float                     # top of the row
    bar_x: float
    bar_width: float
    value_x: float
    value_anchor: str            # "start" | "end"
    negative: bool


class ChartLayout(BaseModel):
    """Geometry for a whole chart, derived from at most ten data points."""

    model_config = ConfigDict(frozen=True)

    theme: Theme
    width: float
    height: float
    label_width: float
    value_width: float
    bar_area_width: float
    row_height: float
    zero_x: float
    max_abs: float
    has_negative: bool
    bars: list[BarGeometry]

    @property
    def dataset_size(self) -> int:
        return len(self.bars)


class EmptyChart(BaseModel):
    """Nothing chartable; the caller shows ``message`` instead of a chart."""

    model_config = ConfigDict(frozen=True)

    theme: Theme = Theme.DARK
    message: str = "No data available for visualization."


# ---------------------------------------------------------------------------
# API request bodies
# ---------------------------------------------------------------------------

class AnalyzeRequest(_Wire):
    company_name: str = ""
    statement_text: str = ""
    theme: Theme = Theme.DARK


class ChartRequest(_Wire):
    data: list[ExtractedData] = []
    theme: Theme = Theme.DARK


class ReportRequest(_Wire):
    analysis: FinancialAnalysis
    scale: float = 2.0
    background: str = "#ffffff"
    theme: Theme = Theme.LIGHT
