"""
Monthly allocation of management-role score over a career timeline.

Each month, the roles held that month are ranked by per-month baseline
(then by remaining cap headroom), the top len(WEIGHTS) ranks earn
baseline * weight, and the gain is clamped by any shared group cap and then
by the role's own cap. A role that reaches its cap (or whose group reaches
the group cap) drops out of every later month.
"""
from __future__ import annotations

import logging

from ingestion.tenure_parser import TenureRecord, parse_tenure_csv
from scoring.results import CalculationResult, MonthAllocation, MonthDetail, RoleState
from scoring.roles import (
    CAP_EPSILON,
    HEADROOM_EPSILON,
    ROLE_TABLE,
    WEIGHTS,
    GroupCap,
    Role,
    groups_for,
)
from scoring.summary import build_result, round4
from scoring.timeline import active_roles, index_to_ym, month_range

log = logging.getLogger("teacher_score.scoring")


def calculate(csv_text: str) -> CalculationResult:
    """Parse tenure CSV text and run the full allocation. Raises ScoreInputError subclasses."""
    return allocate(parse_tenure_csv(csv_text))


def new_states() -> dict[Role, RoleState]:
    return {role: RoleState() for role in ROLE_TABLE}


def _group_score(states: dict[Role, RoleState], group: GroupCap) -> float:
    return sum(states[m].score for m in group.members)


def _rank_candidates(states: dict[Role, RoleState], roles: list[Role]) -> list[tuple[Role, float]]:
    """(role, baseline per month) sorted by baseline desc, then cap headroom desc. Stable."""
    candidates = []
    for role in roles:
        defn = ROLE_TABLE[role]
        # months_served was already incremented for this month
        per_month = defn.annual_baseline(states[role].months_served - 1) / 12
        headroom = defn.cap - states[role].score + HEADROOM_EPSILON
        candidates.append((role, per_month, headroom))
    candidates.sort(key=lambda c: (-c[1], -c[2]))
    return [(role, per_month) for role, per_month, _ in candidates]


def _credit(states: dict[Role, RoleState], role: Role, gain: float) -> float:
    """Clamp gain by group caps then the role cap, add it, and update capped flags."""
    state = states[role]
    groups = groups_for(role)
    for group in groups:
        remaining = group.cap - _group_score(states, group)
        gain = 0.0 if remaining <= 0 else min(gain, remaining)

    allowable = min(gain, ROLE_TABLE[role].cap - state.score)
    state.score += allowable

    for group in groups:
        if _group_score(states, group) >= group.cap - CAP_EPSILON:
            for member in group.members:
                states[member].capped = True
            log.debug("group cap reached | group=%s", group.name)
    if state.score >= ROLE_TABLE[role].cap - CAP_EPSILON:
        state.capped = True
    return allowable


def allocate_month(states: dict[Role, RoleState], roles: list[Role], index: int) -> MonthDetail:
    """Allocate one month for the given active roles. Mutates states."""
    for role in roles:
        states[role].months_served += 1

    detail = MonthDetail(index_to_ym(index))
    for (role, per_month), weight in zip(_rank_candidates(states, roles), WEIGHTS):
        granted = _credit(states, role, per_month * weight)
        detail.allocations.append(MonthAllocation(role, weight, round4(granted)))
    return detail


def allocate(records: list[TenureRecord]) -> CalculationResult:
    """Walk the month range of the records in ascending order and aggregate."""
    months = month_range(records)
    log.debug(
        "allocating | records=%d | months=%s..%s",
        len(records), index_to_ym(months.start), index_to_ym(months.stop - 1),
    )
    states = new_states()
    month_details: list[MonthDetail] = []
    for index in months:
        roles = active_roles(records, index, {r: s.capped for r, s in states.items()})
        if not roles:
            continue
        month_details.append(allocate_month(states, roles, index))
    capped = [r.value for r, s in states.items() if s.capped]
    log.debug("allocation done | months_processed=%d | capped=%s", len(month_details), capped)
    return build_result(states, month_details)
