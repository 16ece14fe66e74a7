"""
Shared pytest fixtures for scoring, services and API tests.
Run from project root: pytest or python -m pytest (pytest.ini sets pythonpath = .).
"""
from __future__ import annotations

import logging
from pathlib import Path

import pytest
import yaml

from app.services import DEFAULT_SAMPLE_CSV


def csv_lines(*rows: tuple[str, str, str]) -> str:
    """Build quoted tenure CSV text from (role, start, end) tuples."""
    return "\n".join(f'"{r}","{s}","{e}"' for r, s, e in rows)


@pytest.fixture(autouse=True)
def reset_score_logging():
    """Drop teacher_score handlers bound to a test's captured stdout."""
    yield
    root = logging.getLogger("teacher_score")
    for h in root.handlers:
        h.close()
    root.handlers.clear()


@pytest.fixture
def make_csv():
    return csv_lines


@pytest.fixture
def sample_csv() -> str:
    return DEFAULT_SAMPLE_CSV


@pytest.fixture
def single_month_csv() -> str:
    return csv_lines(("班主任", "2020-01-01", "2020-01-31"))


@pytest.fixture
def homeroom_group_csv() -> str:
    """班主任 and 副班主任 held together from 2000-01 until the shared cap fills (2009-12)."""
    return csv_lines(
        ("班主任", "2000-01-01", "2030-12-31"),
        ("副班主任", "2000-01-01", "2030-12-31"),
    )


@pytest.fixture
def temp_config(tmp_path: Path):
    """Write a config.yaml into tmp_path; returns a factory taking the config dict."""
    def _write(data: dict) -> Path:
        path = tmp_path / "config.yaml"
        path.write_text(yaml.safe_dump(data, allow_unicode=True), encoding="utf-8")
        return path
    return _write
