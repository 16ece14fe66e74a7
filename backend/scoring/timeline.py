"""Month arithmetic and the month range spanned by a set of tenure records."""
from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Mapping

from scoring.errors import EmptyInputError

if TYPE_CHECKING:
    from ingestion.tenure_parser import TenureRecord
    from scoring.roles import Role


def month_index(date_str: str) -> int:
    """'YYYY-MM[-DD]' -> year * 12 + (month - 1). Day is ignored."""
    parts = date_str.split("-")
    return int(parts[0]) * 12 + (int(parts[1]) - 1)


def index_to_ym(index: int) -> str:
    """Inverse of month_index: 'YYYY-MM'."""
    year, month0 = divmod(index, 12)
    return f"{year}-{month0 + 1:02d}"


def month_range(records: list[TenureRecord]) -> range:
    """Inclusive [earliest start, latest end] as an ascending range of month indexes."""
    if not records:
        raise EmptyInputError()
    lo = min(r.start_index for r in records)
    hi = max(r.end_index for r in records)
    return range(lo, hi + 1)


def active_roles(
    records: Iterable[TenureRecord],
    index: int,
    capped: Mapping[Role, bool],
) -> list[Role]:
    """
    Distinct roles whose tenure covers month `index` and which are not capped,
    in order of first appearance in the input.
    """
    out: list[Role] = []
    for rec in records:
        if rec.role in out or capped.get(rec.role, False):
            continue
        if rec.covers(index):
            out.append(rec.role)
    return out
