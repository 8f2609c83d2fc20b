"""Quarterly sales report extraction.

The report is a PDF table with one locality per line: an upper-case name,
the median price, then change percentages and sales counts. Text is pulled
out with pdfplumber (or read from a pre-extracted ``.txt``) and scanned line
by line.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable

from property_finder.common.errors import StageError
from property_finder.common.fs import read_json, read_text, write_json
from property_finder.common.models import ReportRow

PRICE_MIN = 50_000
PRICE_MAX = 99_999_999
REPORT_COMMENT = "Quarterly median prices by locality. Keys match suburbs.json suburb names."

_LINE_RE = re.compile(r"^([A-Z][A-Z0-9 ()\-]+?)\s+(\d{5,7})(?=\s|$)")
_HEADER_RE = re.compile(r"^(?:Locality|MEDIAN|Change|Apr-Jun|No\. of Sales|Legend|Vacant|Q1 |Q2 )", re.IGNORECASE)
_NUMBER_TOKEN_RE = re.compile(r"^-?\d+\.?\d*$")
_ROMAN_RE = re.compile(r"\b(Ii|Iii|Iv|Vi|Vii|Viii|Ix|Xi)\b", re.IGNORECASE)


def title_case(value: str) -> str:
    titled = re.sub(r"\b\w", lambda m: m.group(0).upper(), value.strip().lower())
    return _ROMAN_RE.sub(lambda m: m.group(0).upper(), titled)


def parse_report_line(line: str) -> tuple[str, ReportRow] | None:
    match = _LINE_RE.match(line)
    if not match:
        return None
    raw_name = match.group(1).strip()
    median = int(match.group(2))
    if median < PRICE_MIN or median > PRICE_MAX:
        return None
    if _HEADER_RE.match(raw_name) or raw_name[:1] in ("%", "$") or raw_name[:1].isdigit():
        return None

    tokens = [token for token in re.split(r"\s+", line[match.end():]) if _NUMBER_TOKEN_RE.match(token)]
    annual_change = next((float(t) for t in tokens if "." in t and abs(float(t)) < 100), None)
    counts = [int(t) for t in tokens if t.isdigit() and len(t) <= 4]
    sales_count = counts[-1] if counts else None

    return title_case(raw_name), ReportRow(median_price=median, annual_change=annual_change, sales_count=sales_count)


def extract_report_rows(lines: Iterable[str]) -> dict[str, ReportRow]:
    """Parse every line; for repeated localities keep the row that has a sales count."""
    rows: dict[str, ReportRow] = {}
    for line in lines:
        parsed = parse_report_line(line)
        if parsed is None:
            continue
        name, row = parsed
        existing = rows.get(name)
        if existing is not None and row.sales_count is None:
            continue
        rows[name] = ReportRow(
            median_price=row.median_price,
            annual_change=row.annual_change if row.annual_change is not None else (existing.annual_change if existing else None),
            sales_count=row.sales_count if row.sales_count is not None else (existing.sales_count if existing else None),
        )
    return rows


def read_report_text(path: Path) -> str:
    if not path.exists():
        raise StageError(f"Report input not found: {path}")
    if path.suffix.lower() != ".pdf":
        return read_text(path)

    import pdfplumber

    with pdfplumber.open(path) as pdf:
        return "\n".join(page.extract_text() or "" for page in pdf.pages)


def write_report_rows(path: Path, rows: dict[str, ReportRow]) -> None:
    payload: dict = {"_comment": REPORT_COMMENT}
    for name in sorted(rows):
        payload[name] = rows[name].to_dict()
    write_json(path, payload)


def load_report_rows(path: Path) -> dict[str, ReportRow]:
    if not path.exists():
        raise StageError(f"Report rows not found, run extract-report first: {path}")
    payload = read_json(path)
    if not isinstance(payload, dict):
        raise StageError(f"Report rows must be a JSON object: {path}")
    return {
        name: ReportRow.from_dict(value)
        for name, value in payload.items()
        if not name.startswith("_") and isinstance(value, dict) and value.get("medianPrice") is not None
    }


def run_extract_report(input_path: Path, output_path: Path) -> dict:
    text = read_report_text(input_path)
    lines = re.split(r"\r?\n", text)
    rows = extract_report_rows(lines)
    write_report_rows(output_path, rows)
    return {"lines": len(lines), "localities": len(rows), "output_path": str(output_path)}
