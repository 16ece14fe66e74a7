"""
Static management-role table. Caps, annual baseline tiers, concurrency weights
and shared group caps. Fixed at build time; never mutated at runtime.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from scoring.errors import UnknownRoleError


class Role(str, Enum):
    """Management roles. Value is the label used in tenure CSV input."""

    CLASS = "班主任"
    VICE = "副班主任"
    GRADE = "年级组长"
    SUBJECT = "科组长"
    PREP = "备课组长"
    MID = "中层干部"
    DEPT = "学科主任"


@dataclass(frozen=True)
class RoleDefinition:
    code: str
    cap: float
    # Annual rates: [0] for the first SENIOR_TIER_MONTHS served, [1] (if present) afterwards
    baselines: tuple[float, ...]

    def annual_baseline(self, months_served: int) -> float:
        """Annual rate for a month, given the months already served strictly before it."""
        if months_served >= SENIOR_TIER_MONTHS and len(self.baselines) > 1:
            return self.baselines[1]
        return self.baselines[0]


@dataclass(frozen=True)
class GroupCap:
    """Shared ceiling across linked roles, checked on top of each member's own cap."""

    name: str
    members: frozenset[Role]
    cap: float


ROLE_TABLE: dict[Role, RoleDefinition] = {
    Role.CLASS: RoleDefinition("CLASS", 15, (1, 1.5)),
    Role.VICE: RoleDefinition("VICE", 15, (0.5, 0.75)),
    Role.GRADE: RoleDefinition("GRADE", 15, (1, 1.5)),
    Role.SUBJECT: RoleDefinition("SUBJECT", 15, (1, 1.5)),
    Role.PREP: RoleDefinition("PREP", 8, (0.5,)),
    Role.MID: RoleDefinition("MID", 20, (1.2, 1.5)),
    Role.DEPT: RoleDefinition("DEPT", 15, (1, 1.5)),
}

GROUP_CAPS: tuple[GroupCap, ...] = (
    GroupCap("homeroom", frozenset({Role.CLASS, Role.VICE}), 15),
)

# Multiplier by rank among the month's concurrently held roles; ranks past the end get nothing
WEIGHTS: tuple[float, ...] = (1, 0.5, 0.25, 0.125, 0.0625)

SENIOR_TIER_MONTHS = 72

# Added to cap headroom when ranking candidates
HEADROOM_EPSILON = 1e-9
# Tolerance for "cap reached"
CAP_EPSILON = 1e-6

_BY_LABEL = {r.value: r for r in Role}


def role_from_label(label: str) -> Role:
    """Look up a role by its CSV label (exact match). Raises UnknownRoleError."""
    role = _BY_LABEL.get(label)
    if role is None:
        raise UnknownRoleError(label)
    return role


def groups_for(role: Role) -> list[GroupCap]:
    return [g for g in GROUP_CAPS if role in g.members]
