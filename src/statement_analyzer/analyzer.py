"""Claude-powered financial statement analysis.

Sends the pasted statement text to the Anthropic Messages API with a
forced tool call whose input schema is RESPONSE_SCHEMA, so the answer
comes back as one structured record: extracted figures, ratios, a CFA-style
summary, a Buy/Hold/Sell recommendation and a disclaimer.

The API client is passed in by the caller (see build_client); nothing here
reads credentials at import time.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import ValidationError

from statement_analyzer.config import Settings, require_api_key
from statement_analyzer.models import FinancialAnalysis

log = logging.getLogger(__name__)

TOOL_NAME = "record_financial_analysis"

INVALID_FORMAT_MESSAGE = "The AI model returned an invalid format. Please try again."
FAILED_MESSAGE = "Failed to analyze the financial statement."
MISSING_INPUT_MESSAGE = "Please provide both a company name and the financial statement text."


class AnalysisError(Exception):
    """The analysis could not be produced; the message is safe to show."""


class MissingInputError(AnalysisError):
    """Company name or statement text was blank."""


RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "companyName": {
            "type": "string",
            "description": "The name of the company being analyzed.",
        },
        "statementType": {
            "type": "string",
            "description": "The type of financial statement (e.g., Balance Sheet, Income Statement, Cash Flow Statement).",
        },
        "extractedData": {
            "type": "array",
            "description": "Key-value pairs of financial data extracted. Include at least 5-10 key metrics.",
            "items": {
                "type": "object",
                "properties": {
                    "metric": {"type": "string"},
                    "value": {
                        "type": "string",
                        "description": "Value as a string, including currency if present.",
                    },
                },
                "required": ["metric", "value"],
            },
        },
        "ratios": {
            "type": "array",
            "description": "Calculated financial ratios. Provide at least 3 relevant ratios.",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "value": {"type": "string"},
                    "interpretation": {
                        "type": "string",
                        "description": "A professional, one-sentence interpretation of what this ratio indicates about the company's financial health.",
                    },
                },
                "required": ["name", "value", "interpretation"],
            },
        },
        "summary": {
            "type": "object",
            "description": "A detailed summary written from the perspective of a chartered financial analyst.",
            "properties": {
                "strengths": {
                    "type": "string",
                    "description": "1-2 sentences highlighting the key financial strengths.",
                },
                "weaknesses": {
                    "type": "string",
                    "description": "1-2 sentences highlighting the key financial weaknesses or risks.",
                },
                "outlook": {
                    "type": "string",
                    "description": "A 1-2 sentence forward-looking statement on the company's financial trajectory based on this statement.",
                },
            },
            "required": ["strengths", "weaknesses", "outlook"],
        },
        "recommendation": {
            "type": "string",
            "description": "An investment recommendation, which must be one of: 'Buy', 'Hold', or 'Sell'.",
            "enum": ["Buy", "Hold", "Sell"],
        },
        "cfaDisclaimer": {
            "type": "string",
            "description": "A standard disclaimer that this AI-generated analysis is for informational purposes and not a substitute for professional financial advice.",
        },
    },
    "required": [
        "companyName", "statementType", "extractedData", "ratios",
        "summary", "recommendation", "cfaDisclaimer",
    ],
}


def build_prompt(statement_text: str, company_name: str) -> str:
    """Instructions plus the statement, fenced between --- lines."""
    return f"""\
As a professional chartered financial analyst, analyze the following financial statement for the UAE-listed company: "{company_name}".

Your analysis must be rigorous, insightful, and adhere to the highest professional standards. Your tasks are:
1.  Identify the statement type (Balance Sheet, Income Statement, or Cash Flow Statement).
2.  Extract the most critical financial figures. Focus on core metrics and ignore non-essential data like headers, footers, or notes.
3.  Calculate at least three key financial ratios relevant to the identified statement type. Provide a concise, professional interpretation for each.
4.  Provide a detailed summary, broken down into:
    - Strengths: Key positive indicators.
    - Weaknesses: Key risks or areas of concern.
    - Outlook: A forward-looking perspective based on the data.
5.  Generate a clear investment recommendation: 'Buy', 'Hold', or 'Sell'.
6.  Include a standard professional disclaimer.

Record the entire analysis with the {TOOL_NAME} tool, as a single object matching its schema.

Financial Statement Text for {company_name}:
---
{statement_text}
---
"""


def build_client(config: Settings):
    """Create the Anthropic client; raises ConfigError without a key."""
    api_key = require_api_key(config)

    import anthropic
    return anthropic.Anthropic(api_key=api_key)


def _extract_payload(response) -> dict:
    """Pull the structured record out of a Messages API response.

    Prefers the forced tool call; falls back to JSON in the text blocks.
    """
    text_parts = []
    for block in response.content:
        if getattr(block, "type", None) == "tool_use" and getattr(block, "name", None) == TOOL_NAME:
            if not isinstance(block.input, dict):
                raise ValueError("tool input is not an object")
            return dict(block.input)
        if hasattr(block, "text"):
            text_parts.append(block.text)

    json_text = "\n".join(text_parts).strip()
    # Tolerate a ```json fence around the object
    if json_text.startswith("```"):
        json_text = json_text.strip("`")
        if json_text.lower().startswith("json"):
            json_text = json_text[4:]
    payload = json.loads(json_text)
    if not isinstance(payload, dict):
        raise ValueError("response JSON is not an object")
    return payload


class StatementAnalyzer:
    """Runs one analysis per call against an injected Anthropic client."""

    def __init__(
        self,
        client: Any,
        *,
        model: str = "claude-sonnet-4-20250514",
        temperature: float = 0.2,
        max_tokens: int = 4096,
    ):
        self._client = client
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    @classmethod
    def from_config(cls, config: Settings, client: Any = None) -> StatementAnalyzer:
        return cls(
            client if client is not None else build_client(config),
            model=config.model,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
        )

    def analyze(self, statement_text: str, company_name: str) -> FinancialAnalysis:
        """Analyze one statement.

        Args:
            statement_text: raw statement text (pasted or uploaded .csv/.txt)
            company_name: company the statement belongs to

        Returns:
            FinancialAnalysis with recommendation normalised to Buy/Hold/Sell/N/A.

        Raises:
            MissingInputError: either input is blank.
            AnalysisError: the API call failed or returned an unusable record.
        """
        if not (statement_text or "").strip() or not (company_name or "").strip():
            raise MissingInputError(MISSING_INPUT_MESSAGE)

        try:
            response = self._client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                tools=[{
                    "name": TOOL_NAME,
                    "description": "Record the structured financial statement analysis.",
                    "input_schema": RESPONSE_SCHEMA,
                }],
                tool_choice={"type": "tool", "name": TOOL_NAME},
                messages=[{"role": "user", "content": build_prompt(statement_text, company_name)}],
            )
            payload = _extract_payload(response)
            result = FinancialAnalysis.model_validate(payload)
        except (ValueError, ValidationError) as exc:
            # json.JSONDecodeError is a ValueError too
            log.exception("Claude returned an unusable analysis for %s", company_name)
            raise AnalysisError(INVALID_FORMAT_MESSAGE) from exc
        except Exception as exc:
            log.exception("Error calling Anthropic API for %s", company_name)
            raise AnalysisError(FAILED_MESSAGE) from exc

        # Keep the requested name when the model leaves it out
        if not result.company_name.strip():
            result = result.model_copy(update={"company_name": company_name})

        log.info(
            "Analyzed %s: %s, %d figures, %d ratios, %s",
            result.company_name, result.statement_type or "?",
            len(result.extracted_data), len(result.ratios), result.recommendation.value,
        )
        return result
