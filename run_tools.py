#!/usr/bin/env python3
"""Standalone CLI to try the Statement Analyzer pieces from the terminal.

Usage — run any of these from the project root (after `pip install -e .`):

  # Parse a formatted value
  python run_tools.py parse "AED 1,250,000"
  python run_tools.py parse "(2.3M)"

  # Chart layout for a JSON file of [{"metric": ..., "value": ...}, ...]
  # (a full analysis JSON works too; its extractedData is used)
  python run_tools.py chart data.json
  python run_tools.py chart data.json light

  # Same, written out as SVG
  python run_tools.py svg data.json chart.svg

  # Analyze a statement file with Claude (needs ANTHROPIC_API_KEY)
  python run_tools.py analyze "Emaar Properties PJSC" statement.txt
  python run_tools.py analyze "Emaar Properties PJSC" statement.txt analysis.json

  # Render an analysis JSON to PDF
  python run_tools.py pdf analysis.json
  python run_tools.py pdf analysis.json out.pdf

  # Configuration check
  python run_tools.py health
"""

from __future__ import annotations

import json
import sys
from pathlib import Path


def _fmt(val, indent=2):
    """Pretty-print a value."""
    if isinstance(val, dict):
        return json.dumps(val, indent=indent, default=str)
    if isinstance(val, list):
        return json.dumps(val[:20], indent=indent, default=str)  # Cap at 20 items
    return str(val)


def _header(title: str):
    print(f"\n{'='*60}")
    print(f"  {title}")
    print(f"{'='*60}\n")


def _load_data(path: str) -> list[dict]:
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    if isinstance(raw, dict):
        raw = raw.get("extractedData", raw.get("extracted_data", []))
    return raw


def cmd_parse(value: str):
    """Parse one formatted value."""
    _header(f"Parse: {value!r}")
    from statement_analyzer.valueparse import clean_value, is_chartable, parse_value
    num = parse_value(value)
    print(f"  Cleaned:    {clean_value(value)!r}")
    print(f"  Value:      {num!r}")
    print(f"  Chartable:  {'yes' if is_chartable(num) else 'no (zero or unparseable)'}")


def cmd_chart(path: str, theme: str = "dark"):
    """Print the bar chart geometry for a data file."""
    _header(f"Chart layout: {path} | theme={theme}")
    from statement_analyzer.chart import layout_chart
    from statement_analyzer.models import EmptyChart

    layout = layout_chart(_load_data(path), theme)
    if isinstance(layout, EmptyChart):
        print(f"  {layout.message}")
        return

    print(f"  Size:       {layout.width:g} x {layout.height:g}")
    print(f"  Zero axis:  x={layout.zero_x:g}  (negatives: {'yes' if layout.has_negative else 'no'})")
    print(f"  Max |v|:    {layout.max_abs:,.2f}")
    print()
    print(f"  {'Label':25s}  {'Value':>18s}  {'bar x':>7s}  {'width':>7s}  anchor")
    print(f"  {'-'*25}  {'-'*18}  {'-'*7}  {'-'*7}  {'-'*6}")
    for b in layout.bars:
        print(f"  {b.label:25s}  {b.numeric_value:>18,.2f}  {b.bar_x:7.2f}  {b.bar_width:7.2f}  {b.value_anchor}")
    print(f"\n  Entries: {layout.dataset_size}")


def cmd_svg(path: str, out: str = "chart.svg", theme: str = "dark"):
    """Write the chart for a data file as SVG."""
    _header(f"SVG: {path} -> {out}")
    from statement_analyzer.chart import layout_chart, render_svg
    from statement_analyzer.models import EmptyChart

    layout = layout_chart(_load_data(path), theme)
    if isinstance(layout, EmptyChart):
        print(f"  {layout.message}")
        return
    Path(out).write_text(render_svg(layout), encoding="utf-8")
    print(f"  Wrote {out} ({layout.dataset_size} bars)")


def cmd_analyze(company: str, path: str, out: str | None = None):
    """Run a full analysis of a statement file."""
    _header(f"Analyze: {company} | {path}")
    from statement_analyzer.analyzer import AnalysisError, StatementAnalyzer
    from statement_analyzer.config import ConfigError, get_config

    try:
        analyzer = StatementAnalyzer.from_config(get_config())
    except ConfigError as exc:
        print(f"  ERROR: {exc}")
        return

    text = Path(path).read_text(encoding="utf-8", errors="replace")
    try:
        result = analyzer.analyze(text, company)
    except AnalysisError as exc:
        print(f"  ERROR: {exc}")
        return

    print(f"  Company:         {result.company_name}")
    print(f"  Statement:       {result.statement_type}")
    print(f"  Recommendation:  {result.recommendation.value}")
    print("\n  Extracted Data:")
    for d in result.extracted_data:
        print(f"    {d.metric:40s}  {d.value}")
    print("\n  Ratios:")
    for r in result.ratios:
        print(f"    {r.name:30s}  {r.value:>10s}  {r.interpretation}")
    print("\n  Summary:")
    print(_fmt(result.summary.model_dump()))

    if out:
        Path(out).write_text(result.model_dump_json(by_alias=True, indent=2), encoding="utf-8")
        print(f"\n  Saved analysis to {out}")


def cmd_pdf(path: str, out: str | None = None):
    """Render a saved analysis JSON to PDF."""
    from statement_analyzer.export import ExportError, render_report_pdf, report_filename
    from statement_analyzer.models import FinancialAnalysis

    analysis = FinancialAnalysis.model_validate_json(Path(path).read_text(encoding="utf-8"))
    out = out or report_filename(analysis.company_name)
    _header(f"PDF: {path} -> {out}")
    try:
        pdf = render_report_pdf(analysis)
    except ExportError as exc:
        print(f"  ERROR: {exc}")
        return
    Path(out).write_bytes(pdf)
    print(f"  Wrote {out} ({len(pdf):,} bytes)")


def cmd_health():
    """Check configuration."""
    _header("Health check")
    from statement_analyzer.config import get_config

    config = get_config()
    print(f"  Model:         {config.model}")
    print(f"  Temperature:   {config.temperature}")
    print(f"  Max tokens:    {config.max_tokens}")
    print(f"  Port:          {config.port}")
    key = config.anthropic_api_key
    print(f"  API key:       {'set (' + key[:7] + '...)' if key else 'MISSING'}")


COMMANDS = {
    "parse": (cmd_parse, "value"),
    "chart": (cmd_chart, "data.json [theme]"),
    "svg": (cmd_svg, "data.json [out.svg] [theme]"),
    "analyze": (cmd_analyze, "company statement.txt [out.json]"),
    "pdf": (cmd_pdf, "analysis.json [out.pdf]"),
    "health": (cmd_health, ""),
}

_MIN_ARGS = {"analyze": 2}


def main():
    if len(sys.argv) < 2 or sys.argv[1] in ("-h", "--help", "help"):
        print("\nStatement Analyzer — Standalone Tool Tester")
        print("=" * 44)
        print("\nUsage: python run_tools.py <command> [args]\n")
        print("Commands:")
        for cmd, (_, args) in COMMANDS.items():
            print(f"  {cmd:16s}  {args}")
        print()
        print("Examples:")
        print("  python run_tools.py parse 'AED 1,250,000'")
        print("  python run_tools.py chart data.json light")
        print("  python run_tools.py analyze 'Emaar Properties PJSC' statement.txt analysis.json")
        print("  python run_tools.py pdf analysis.json")
        print("  python run_tools.py health")
        return

    cmd_name = sys.argv[1].lower()
    if cmd_name not in COMMANDS:
        print(f"Unknown command: {cmd_name}")
        print(f"Available: {', '.join(COMMANDS.keys())}")
        return

    fn, _ = COMMANDS[cmd_name]

    if cmd_name == "parse":
        fn(" ".join(sys.argv[2:]))
    elif cmd_name == "health":
        fn()
    elif len(sys.argv) - 2 < _MIN_ARGS.get(cmd_name, 1):
        print(f"Usage: python run_tools.py {cmd_name} {COMMANDS[cmd_name][1]}")
    else:
        fn(*sys.argv[2:])


if __name__ == "__main__":
    main()
