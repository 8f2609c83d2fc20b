from pathlib import Path

import pytest

from property_finder.common.errors import StageError
from property_finder.common.models import ReportRow
from property_finder.pipeline.report import (
    extract_report_rows,
    load_report_rows,
    parse_report_line,
    run_extract_report,
    title_case,
)


def test_title_case_upper_cases_roman_numerals():
    assert title_case("SOUTH MORANG") == "South Morang"
    assert title_case("MOUNT ELIZA II") == "Mount Eliza II"


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ("SOUTH MORANG 780000 775000 790000 1.3 2.1 45 52", ("South Morang", ReportRow(780000, 1.3, 52))),
        ("ABBOTSFORD 1325000", ("Abbotsford", ReportRow(1325000, None, None))),
        ("TOORAK 4750000 4600000 3.3 -2.5 12", ("Toorak", ReportRow(4750000, 3.3, 12))),
    ],
)
def test_parse_report_line(line, expected):
    assert parse_report_line(line) == expected


@pytest.mark.parametrize(
    "line",
    [
        "Locality 2024 2025",
        "MEDIAN 123456",
        "SMALLTOWN 12000",
        "Geelong 700000",
        "",
    ],
)
def test_parse_report_line_skips_headers_and_noise(line):
    assert parse_report_line(line) is None


def test_recurring_locality_prefers_row_with_sales_count():
    rows = extract_report_rows(
        [
            "KEW 2400000 2300000 4.3 1.1 40",
            "KEW 2500000",
            "RICHMOND 1400000",
            "RICHMOND 1450000 1400000 3.6 22",
        ]
    )

    assert rows["Kew"] == ReportRow(2400000, 4.3, 40)
    assert rows["Richmond"] == ReportRow(1450000, 3.6, 22)


def test_run_extract_report_from_text_extract(tmp_path: Path):
    source = tmp_path / "report.txt"
    source.write_text("Locality Apr-Jun\nSOUTH MORANG 780000 1.3 52\nKEW 2400000 4.3 40\n", encoding="utf-8")
    output = tmp_path / "report.json"

    stats = run_extract_report(source, output)
    rows = load_report_rows(output)

    assert stats["localities"] == 2
    assert set(rows) == {"South Morang", "Kew"}
    assert rows["Kew"].sales_count == 40


def test_missing_inputs_raise_stage_error(tmp_path: Path):
    with pytest.raises(StageError):
        run_extract_report(tmp_path / "missing.pdf", tmp_path / "out.json")
    with pytest.raises(StageError):
        load_report_rows(tmp_path / "out.json")
