"""
Command-line score calculation for one tenure CSV file.
Usage: from project root:
  PYTHONPATH=. python pipeline/run_score.py --input tenure.csv [--export report.csv] [--json]
  PYTHONPATH=. python pipeline/run_score.py --sample
Exit code 1 when the input is rejected.
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path

# Ensure project root on path
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from dotenv import load_dotenv  # noqa: E402

load_dotenv(_ROOT / ".env")

from app.services import (  # noqa: E402
    DEFAULT_SAMPLE_CSV,
    DEFAULT_TOTAL_DISPLAY_CAP,
    export_result_csv,
    load_tenure_text,
    result_to_dict,
    run_calculation,
)
from config_loader import config_section, load_config  # noqa: E402


class _FlushingStreamHandler(logging.StreamHandler):
    """StreamHandler that flushes after each emit so output appears immediately."""

    def emit(self, record: logging.LogRecord) -> None:
        super().emit(record)
        if self.stream:
            try:
                self.stream.flush()
            except (OSError, ValueError):
                pass


def _setup_logging(level: str = "INFO", log_dir: Path | None = None) -> logging.Logger:
    """Console at `level`, plus a DEBUG file in log_dir when given. Also captures the scoring logger."""
    fmt_console = "%(asctime)s | %(levelname)s | %(message)s"
    fmt_file = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    date_fmt = "%Y-%m-%d %H:%M:%S"

    root = logging.getLogger("teacher_score")
    root.setLevel(logging.DEBUG)
    for h in root.handlers:
        h.close()
    root.handlers.clear()

    ch = _FlushingStreamHandler(sys.stdout)
    ch.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    ch.setFormatter(logging.Formatter(fmt_console, date_fmt))
    root.addHandler(ch)

    log = logging.getLogger("teacher_score.cli")
    if log_dir:
        log_dir.mkdir(parents=True, exist_ok=True)
        ts = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_path = log_dir / f"score_{ts}.log"
        fh = logging.FileHandler(log_path, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(fmt_file, date_fmt))
        root.addHandler(fh)
        log.info("Log file: %s", log_path)
    return log


def run(
    input_path: str | Path | None = None,
    config_path: str | Path | None = None,
    export_path: str | Path | None = None,
    as_json: bool = False,
    log_dir: str | Path | None = None,
) -> int:
    """Calculate for input_path (or the built-in sample when None). Returns the exit code."""
    cfg = load_config(config_path)
    log_cfg = config_section(cfg, "logging")
    export_cfg = config_section(cfg, "export")
    log_dir = log_dir or log_cfg.get("dir")
    log_dir_path = None
    if log_dir:
        log_dir_path = Path(log_dir) if Path(log_dir).is_absolute() else _ROOT / log_dir
    log = _setup_logging(log_cfg.get("level", "INFO"), log_dir_path)

    if input_path is None:
        log.info("Input: built-in sample")
        text = DEFAULT_SAMPLE_CSV
    else:
        text, err = load_tenure_text(input_path)
        if err:
            log.error("Cannot read input | %s", err)
            return 1
        log.info("Input: %s", input_path)

    result, err = run_calculation(text)
    if err or result is None:
        log.error("Input rejected | %s", err)
        return 1

    for s in result.role_summary:
        log.info("%s | score=%.4f | cap=%g | %s", s.role.value, s.score, s.cap, "capped" if s.capped else "open")
    log.info("Total score=%.4f | months_processed=%d", result.total_score, len(result.month_details))

    if export_path:
        cap = export_cfg.get("total_display_cap", DEFAULT_TOTAL_DISPLAY_CAP)
        err = export_result_csv(result, export_path, cap)
        if err:
            log.error("Export failed | path=%s | error=%s", export_path, err)
            return 1
        log.info("Exported report: %s", export_path)

    if as_json:
        sys.stdout.write(json.dumps(result_to_dict(result), ensure_ascii=False, indent=2) + "\n")
        sys.stdout.flush()
    return 0


def main() -> None:
    p = argparse.ArgumentParser(description="Teacher management-role score: tenure CSV → per-role scores")
    src = p.add_mutually_exclusive_group(required=True)
    src.add_argument("--input", default=None, help="Tenure CSV file (role,start,end per line)")
    src.add_argument("--sample", action="store_true", help="Use the built-in sample timeline")
    p.add_argument("--config", default=None, help="Path to config.yaml")
    p.add_argument("--export", default=None, help="Write the CSV report here")
    p.add_argument("--json", action="store_true", help="Print the full result as JSON")
    p.add_argument("--log-dir", default=None, help="Directory for a DEBUG log file")
    args = p.parse_args()
    sys.exit(run(
        input_path=None if args.sample else args.input,
        config_path=args.config,
        export_path=args.export,
        as_json=args.json,
        log_dir=args.log_dir,
    ))


if __name__ == "__main__":
    main()
