"""Parse human-formatted monetary strings into signed floats for charting.

The model writes figures the way the statement shows them: "AED 1,250,000",
"$3.4M", "(2,500)".  ``parse_value`` turns those into plain magnitudes.

Known limitation: ``0.0`` is returned both for a genuine zero and for
anything that could not be parsed ("N/A", "See appendix", "").  Callers
cannot tell the two apart and treat both as "not chartable".
"""

from __future__ import annotations

import math
import re
from typing import Any

# Currency noise removed before parsing; "AED" is matched as a whole token
_NOISE_RE = re.compile(r"AED|[$,\s]")

# Longest leading ASCII decimal numeral: optional sign, optional fraction, no exponent
_LEADING_NUMBER_RE = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)")

MAGNITUDE_SUFFIXES = {
    "K": 1e3,
    "M": 1e6,
    "B": 1e9,
}


def clean_value(raw: str) -> str:
    """Strip currency noise and turn accounting parentheses into a minus sign.

    Parentheses are swapped character by character without checking that
    they balance, so "((5" becomes "--5" and later fails to parse.
    """
    cleaned = _NOISE_RE.sub("", raw)
    return cleaned.replace("(", "-").replace(")", "")


def parse_value(raw: Any) -> float:
    """Convert a formatted value string into a float.

    Never raises.  Returns 0.0 for non-strings and for strings without a
    leading numeral.  A trailing K/M/B (any case) scales the result; the
    suffix letter itself is simply ignored by the numeral match.

    >>> parse_value("AED 1,250,000")
    1250000.0
    >>> parse_value("(2.3M)")
    -2300000.0
    """
    if not isinstance(raw, str):
        return 0.0

    cleaned = clean_value(raw)
    multiplier = MAGNITUDE_SUFFIXES.get(cleaned[-1:].upper(), 1.0)

    m = _LEADING_NUMBER_RE.match(cleaned)
    if m is None:
        return 0.0

    value = float(m.group()) * multiplier
    if not math.isfinite(value):
        return 0.0
    return value


def is_chartable(value: float) -> bool:
    """True when a parsed value may appear in the chart (i.e. non-zero)."""
    return value != 0.0
