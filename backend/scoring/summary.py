"""Final per-role summary and total once every month has been allocated."""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from scoring.results import CalculationResult, MonthDetail, RoleState, RoleSummary
from scoring.roles import ROLE_TABLE, Role

_FOUR_DP = Decimal("0.0001")


def round4(value: float) -> float:
    """
    Round to 4 decimals, ties away from zero on the exact binary value
    (same digits as JavaScript's toFixed(4), unlike round()'s half-even).
    """
    return float(Decimal(value).quantize(_FOUR_DP, rounding=ROUND_HALF_UP))


def summarize(states: dict[Role, RoleState]) -> list[RoleSummary]:
    """One summary per defined role, in table order, including roles never held."""
    return [
        RoleSummary(role, round4(states[role].score), defn.cap, states[role].capped)
        for role, defn in ROLE_TABLE.items()
    ]


def build_result(states: dict[Role, RoleState], month_details: list[MonthDetail]) -> CalculationResult:
    role_summary = summarize(states)
    # Sum of the already-rounded scores, then rounded again
    total = round4(sum(s.score for s in role_summary))
    return CalculationResult(role_summary, total, month_details)
