"""
App services: run a calculation from pasted tenure CSV, turn the result into
JSON-ready dicts, and export it as the downloadable CSV report.
Errors come back as strings for the UI, never as partial results.
"""
from __future__ import annotations

import csv
import io
import math
from datetime import date
from pathlib import Path
from typing import Any

from scoring.allocator import calculate
from scoring.errors import ScoreInputError
from scoring.results import CalculationResult
from scoring.roles import GROUP_CAPS, ROLE_TABLE

DEFAULT_SAMPLE_CSV = "\n".join([
    '"班主任","2006-09-01","2010-08-31"',
    '"副班主任","2010-09-01","2011-08-31"',
    '"班主任","2011-09-01","2016-08-31"',
    '"年级组长","2014-09-01","2019-08-31"',
    '"副班主任","2016-09-01","2020-08-31"',
    '"科组长","2019-09-01","2024-12-31"',
    '"班主任","2020-09-01","2021-08-31"',
    '"中层干部","2021-06-01","2024-12-31"',
])

DEFAULT_TOTAL_DISPLAY_CAP = 30
DEFAULT_FILENAME_PREFIX = "教师得分计算结果"

CAPPED_LABEL = "已封顶"
UNCAPPED_LABEL = "未封顶"


def run_calculation(text: str) -> tuple[CalculationResult | None, str | None]:
    """Returns (result, None) or (None, error message)."""
    try:
        return calculate(text), None
    except ScoreInputError as e:
        return None, str(e)


def role_table_dict() -> dict[str, Any]:
    """Static role table and group caps, for display."""
    return {
        "roles": [
            {"role": role.value, "code": d.code, "cap": d.cap, "baselines": list(d.baselines)}
            for role, d in ROLE_TABLE.items()
        ],
        "group_caps": [
            {
                "name": g.name,
                "roles": [r.value for r in ROLE_TABLE if r in g.members],
                "cap": g.cap,
            }
            for g in GROUP_CAPS
        ],
    }


def result_to_dict(result: CalculationResult) -> dict[str, Any]:
    return {
        "roleSummary": [
            {
                "role": s.role.value,
                "code": ROLE_TABLE[s.role].code,
                "score": s.score,
                "cap": s.cap,
                "capped": s.capped,
            }
            for s in result.role_summary
        ],
        "totalScore": result.total_score,
        "monthDetails": [
            {
                "month": m.month,
                "allocations": [
                    {"role": a.role.value, "weight": a.weight, "gain": a.gain} for a in m.allocations
                ],
            }
            for m in result.month_details
        ],
    }


def _percent(weight: float) -> int:
    # Half rounds up: 0.125 -> 13
    return math.floor(weight * 100 + 0.5)


def _status(capped: bool) -> str:
    return CAPPED_LABEL if capped else UNCAPPED_LABEL


def format_result_csv(result: CalculationResult, total_display_cap: float = DEFAULT_TOTAL_DISPLAY_CAP) -> str:
    """
    Report layout: role table, blank line, total line, blank line, one line per
    processed month ("<role> <weight%>% → <gain>" joined by "; ").
    """
    buf = io.StringIO()
    w = csv.writer(buf, lineterminator="\n")
    w.writerow(["岗位", "得分", "封顶分", "状态"])
    for s in result.role_summary:
        w.writerow([s.role.value, f"{s.score:.4f}", f"{s.cap:g}", _status(s.capped)])
    w.writerow([])
    w.writerow([
        "总分",
        f"{result.total_score:.4f}",
        f"{total_display_cap:g}",
        _status(result.total_score >= total_display_cap),
    ])
    w.writerow([])
    w.writerow(["年月", "分配详情"])
    for m in result.month_details:
        detail = "; ".join(f"{a.role.value} {_percent(a.weight)}% → {a.gain:.4f}" for a in m.allocations)
        w.writerow([m.month, detail])
    return buf.getvalue()


def export_filename(day: date | None = None, prefix: str = DEFAULT_FILENAME_PREFIX) -> str:
    day = day or date.today()
    return f"{prefix}_{day.isoformat()}.csv"


def export_result_csv(
    result: CalculationResult | None,
    path: str | Path,
    total_display_cap: float = DEFAULT_TOTAL_DISPLAY_CAP,
) -> str | None:
    """Write the report (UTF-8 with BOM). Returns error message or None."""
    if result is None:
        return "No result to export"
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(format_result_csv(result, total_display_cap), encoding="utf-8-sig")
        return None
    except OSError as e:
        return str(e)


def load_tenure_text(path: str | Path) -> tuple[str, str | None]:
    """Read a tenure CSV file. Returns (text, error message or None)."""
    path = Path(path)
    if not path.exists():
        return "", f"File not found: {path}"
    try:
        return path.read_text(encoding="utf-8-sig"), None
    except (OSError, UnicodeDecodeError) as e:
        return "", str(e)
