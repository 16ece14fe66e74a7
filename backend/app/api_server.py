"""
Teacher score REST API for the web calculator front end.
Run with: uvicorn app.api_server:app --host 127.0.0.1 --port 8765
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from urllib.parse import quote

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from pydantic import BaseModel

# Project root
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

load_dotenv(_ROOT / ".env")

from app.services import (  # noqa: E402
    DEFAULT_FILENAME_PREFIX,
    DEFAULT_SAMPLE_CSV,
    DEFAULT_TOTAL_DISPLAY_CAP,
    export_filename,
    format_result_csv,
    result_to_dict,
    role_table_dict,
)
from config_loader import config_section, load_config  # noqa: E402
from scoring.allocator import calculate  # noqa: E402
from scoring.errors import ScoreInputError  # noqa: E402

log = logging.getLogger("teacher_score.api")

_cfg = load_config()
_api_cfg = config_section(_cfg, "api")
_export_cfg = config_section(_cfg, "export")

app = FastAPI(title="Teacher Score API", version="1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=_api_cfg.get("cors_origins") or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Request/Response models ---
class CalculateRequest(BaseModel):
    csv_text: str


class SampleResponse(BaseModel):
    csv_text: str


def _calculate_or_400(csv_text: str):
    try:
        return calculate(csv_text)
    except ScoreInputError as e:
        log.info("calculation rejected | %s: %s", type(e).__name__, e)
        raise HTTPException(400, {"message": str(e), "error_type": type(e).__name__})


# --- Endpoints ---
@app.get("/api/health")
def health():
    return {"status": "ok", "app": "Teacher Score"}


@app.get("/api/roles")
def roles():
    """Role caps, baseline tiers and shared group caps."""
    return role_table_dict()


@app.get("/api/sample", response_model=SampleResponse)
def sample():
    return {"csv_text": DEFAULT_SAMPLE_CSV}


@app.post("/api/calculate")
def calculate_score(body: CalculateRequest):
    """Run the allocation; 400 with the input error message when the CSV is rejected."""
    result = _calculate_or_400(body.csv_text)
    log.info("calculated | months=%d | total=%.4f", len(result.month_details), result.total_score)
    return result_to_dict(result)


@app.post("/api/export-csv")
def export_csv(body: CalculateRequest):
    """Calculate and return the CSV report as a download."""
    result = _calculate_or_400(body.csv_text)
    cap = _export_cfg.get("total_display_cap", DEFAULT_TOTAL_DISPLAY_CAP)
    filename = export_filename(prefix=_export_cfg.get("filename_prefix") or DEFAULT_FILENAME_PREFIX)
    data = format_result_csv(result, cap).encode("utf-8-sig")
    return Response(
        content=data,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"},
    )


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Console handler on the teacher_score loggers; uvicorn only configures its own."""
    root = logging.getLogger("teacher_score")
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    for h in root.handlers:
        h.close()
    root.handlers.clear()
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(asctime)s | %(levelname)s | %(message)s", "%Y-%m-%d %H:%M:%S"))
    root.addHandler(handler)
    return log


def main():
    import uvicorn
    configure_logging(config_section(_cfg, "logging").get("level", "INFO"))
    uvicorn.run(app, host=_api_cfg.get("host", "127.0.0.1"), port=int(_api_cfg.get("port", 8765)))


if __name__ == "__main__":
    main()
