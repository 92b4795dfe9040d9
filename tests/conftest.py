"""Shared fixtures: a realistic analysis record and a fake Anthropic client."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from statement_analyzer.analyzer import TOOL_NAME
from statement_analyzer.models import FinancialAnalysis


def analysis_payload() -> dict:
    """An analysis exactly as the model would return it (camelCase keys)."""
    return {
        "companyName": "Emaar Properties PJSC",
        "statementType": "Income Statement",
        "extractedData": [
            {"metric": "Revenue", "value": "AED 10,000,000"},
            {"metric": "Net Loss", "value": "(2,000,000)"},
            {"metric": "Notes", "value": "See appendix"},
            {"metric": "Operating Expenses", "value": "AED 3.5M"},
        ],
        "ratios": [
            {"name": "Net Margin", "value": "-20%", "interpretation": "The company is loss-making at the net level."},
            {"name": "Opex Ratio", "value": "35%", "interpretation": "Operating costs absorb a third of revenue."},
            {"name": "Loss Coverage", "value": "5.0x", "interpretation": "Revenue covers the loss five times over."},
        ],
        "summary": {
            "strengths": "Revenue base is large and diversified.",
            "weaknesses": "The period closed with a net loss.",
            "outlook": "Margins should recover as one-off charges roll off.",
        },
        "recommendation": "Hold",
        "cfaDisclaimer": "This AI-generated analysis is for informational purposes only.",
    }


@pytest.fixture
def payload() -> dict:
    return analysis_payload()


@pytest.fixture
def sample_analysis() -> FinancialAnalysis:
    return FinancialAnalysis.model_validate(analysis_payload())


def tool_response(payload: dict) -> SimpleNamespace:
    """A Messages API response carrying one forced tool call."""
    return SimpleNamespace(content=[
        SimpleNamespace(type="tool_use", name=TOOL_NAME, id="toolu_1", input=payload),
    ])


def text_response(text: str) -> SimpleNamespace:
    return SimpleNamespace(content=[SimpleNamespace(type="text", text=text)])


class FakeMessages:
    def __init__(self, response=None, exc: Exception | None = None):
        self.response = response
        self.exc = exc
        self.calls: list[dict] = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.exc is not None:
            raise self.exc
        return self.response


class FakeClient:
    """Stands in for anthropic.Anthropic: only ``messages.create`` is used."""

    def __init__(self, response=None, exc: Exception | None = None):
        self.messages = FakeMessages(response, exc)
