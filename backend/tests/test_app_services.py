"""
Unit tests for app services used by the UI: run_calculation, result_to_dict,
format_result_csv / export_result_csv, export_filename, load_tenure_text.
"""
from __future__ import annotations

from datetime import date
from pathlib import Path

from app.services import (
    export_filename,
    export_result_csv,
    format_result_csv,
    load_tenure_text,
    result_to_dict,
    role_table_dict,
    run_calculation,
)


class TestRunCalculation:
    def test_valid_input_returns_result(self, single_month_csv):
        result, err = run_calculation(single_month_csv)
        assert err is None
        assert result is not None
        assert result.total_score == 0.0833

    def test_unknown_role_returns_message_only(self):
        result, err = run_calculation('"校长","2020-01-01","2020-12-31"')
        assert result is None
        assert err == "未知岗位名称：校长"

    def test_bad_line_message_has_line_number(self):
        result, err = run_calculation('"班主任","2020-01-01","2020-01-31"\nnot a record')
        assert result is None
        assert err.startswith("第 2 行")

    def test_empty_input_returns_message(self):
        result, err = run_calculation("   ")
        assert result is None
        assert err


class TestResultToDict:
    def test_shape(self, single_month_csv):
        result, _ = run_calculation(single_month_csv)
        d = result_to_dict(result)
        assert set(d) == {"roleSummary", "totalScore", "monthDetails"}
        assert len(d["roleSummary"]) == 7
        assert d["roleSummary"][0] == {"role": "班主任", "code": "CLASS", "score": 0.0833, "cap": 15, "capped": False}
        assert d["totalScore"] == 0.0833
        assert d["monthDetails"] == [
            {"month": "2020-01", "allocations": [{"role": "班主任", "weight": 1, "gain": 0.0833}]}
        ]

    def test_role_table(self):
        table = role_table_dict()
        assert [r["code"] for r in table["roles"]] == ["CLASS", "VICE", "GRADE", "SUBJECT", "PREP", "MID", "DEPT"]
        assert table["roles"][4]["baselines"] == [0.5]
        assert table["group_caps"] == [{"name": "homeroom", "roles": ["班主任", "副班主任"], "cap": 15}]


class TestFormatResultCsv:
    def test_layout(self, make_csv):
        result, _ = run_calculation(make_csv(
            ("班主任", "2020-01-01", "2020-02-29"),
            ("中层干部", "2020-02-01", "2020-02-29"),
        ))
        lines = format_result_csv(result).split("\n")
        assert lines[0] == "岗位,得分,封顶分,状态"
        assert lines[1] == "班主任,0.1250,15,未封顶"
        assert lines[6] == "中层干部,0.1000,20,未封顶"
        assert lines[8] == ""
        assert lines[9] == "总分,0.2250,30,未封顶"
        assert lines[10] == ""
        assert lines[11] == "年月,分配详情"
        assert lines[12] == "2020-01,班主任 100% → 0.0833"
        assert lines[13] == "2020-02,中层干部 100% → 0.1000; 班主任 50% → 0.0417"

    def test_capped_status_and_total_display_cap(self, homeroom_group_csv):
        result, _ = run_calculation(homeroom_group_csv)
        text = format_result_csv(result, total_display_cap=15)
        assert "班主任,12.0000,15,已封顶" in text
        assert "总分,15.0000,15,已封顶" in text

    def test_small_weights_as_rounded_percent(self, make_csv):
        rows = [(r, "2020-01-01", "2020-01-31") for r in ("中层干部", "班主任", "年级组长", "科组长", "学科主任")]
        result, _ = run_calculation(make_csv(*rows))
        text = format_result_csv(result)
        assert "科组长 13% → 0.0104" in text
        assert "学科主任 6% → 0.0052" in text


class TestExportResultCsv:
    def test_no_result_returns_error(self, tmp_path: Path):
        out = tmp_path / "out.csv"
        err = export_result_csv(None, out)
        assert err == "No result to export"
        assert not out.exists()

    def test_writes_utf8_with_bom(self, tmp_path: Path, single_month_csv):
        result, _ = run_calculation(single_month_csv)
        out = tmp_path / "reports" / "out.csv"
        err = export_result_csv(result, out)
        assert err is None
        raw = out.read_bytes()
        assert raw.startswith(b"\xef\xbb\xbf")
        assert out.read_text(encoding="utf-8-sig") == format_result_csv(result)

    def test_export_filename(self):
        assert export_filename(date(2024, 3, 5)) == "教师得分计算结果_2024-03-05.csv"
        assert export_filename(date(2024, 3, 5), prefix="score") == "score_2024-03-05.csv"


class TestLoadTenureText:
    def test_missing_file(self, tmp_path: Path):
        text, err = load_tenure_text(tmp_path / "missing.csv")
        assert text == ""
        assert "not found" in err.lower()

    def test_reads_file_with_bom(self, tmp_path: Path, single_month_csv):
        path = tmp_path / "tenure.csv"
        path.write_text(single_month_csv, encoding="utf-8-sig")
        text, err = load_tenure_text(path)
        assert err is None
        assert text == single_month_csv
