import csv
import io
import zipfile

import pytest
from openpyxl import load_workbook

from log_section import config
from log_section.analyzer import analyze_log_section
from log_section.errors import ExportError
from log_section.export import records_to_csv, results_to_rows, to_csv_string, write_csv, write_xlsx
from log_section.models import AnalysisFailure

from .fixtures.rasters import make_rectangle


@pytest.fixture
def results():
    return [
        analyze_log_section(make_rectangle(), 300.0, "one.png"),
        analyze_log_section(make_rectangle(width=20), 250.0, "two.png"),
    ]


def test_csv_has_headers_and_rows_in_order(results):
    rows = list(csv.reader(io.StringIO(to_csv_string(results))))
    assert rows[0] == config.EXPORT_HEADERS
    assert [r[0] for r in rows[1:]] == ["one.png", "two.png"]
    assert float(rows[1][1]) == pytest.approx(results[0].area_mm2)


def test_write_csv_to_file(results, tmp_path):
    path = tmp_path / "out.csv"
    write_csv(results, str(path))
    assert path.read_text(encoding="utf-8").startswith("Filename,")


def test_write_csv_bad_path_raises(results, tmp_path):
    with pytest.raises(ExportError):
        write_csv(results, str(tmp_path / "missing" / "out.csv"))


def test_rows_blank_for_missing_detected_height(results):
    assert results_to_rows(results)[0][6] == ""


def test_records_to_csv():
    out = records_to_csv([{"a": "1", "b": "x,y"}, {"a": "2"}], "f.csv")
    assert out["filename"] == "f.csv"
    assert out["content"] == '"a","b"\n"1","x,y"\n"2",""'
    assert records_to_csv([{"a": 1}])["filename"] == config.CSV_FILENAME


def test_records_to_csv_empty_raises():
    with pytest.raises(ExportError):
        records_to_csv([])


def test_write_xlsx_embeds_images(results, tmp_path):
    path = tmp_path / "out.xlsx"
    failures = [AnalysisFailure(2, "bad.png", "NoRegionFound", "empty")]
    write_xlsx(results, str(path), failures=failures)

    wb = load_workbook(str(path))
    ws = wb["Results"]
    assert [c.value for c in ws[1]][:len(config.EXPORT_HEADERS)] == config.EXPORT_HEADERS
    assert ws["A2"].value == "one.png"
    assert ws["A3"].value == "two.png"
    with zipfile.ZipFile(str(path)) as zf:
        media = [n for n in zf.namelist() if n.startswith("xl/media/")]
    assert len(media) == 2
    assert wb["Failures"]["B2"].value == "bad.png"


def test_write_xlsx_bad_path_raises(results, tmp_path):
    with pytest.raises(ExportError):
        write_xlsx(results, str(tmp_path / "missing" / "out.xlsx"))
