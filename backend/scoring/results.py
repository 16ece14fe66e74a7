"""Running state and result containers for one calculation."""
from __future__ import annotations

from dataclasses import dataclass, field

from scoring.roles import Role


@dataclass
class RoleState:
    score: float = 0.0
    months_served: int = 0
    capped: bool = False


@dataclass
class MonthAllocation:
    role: Role
    weight: float
    gain: float  # granted after clamps, 4dp


@dataclass
class MonthDetail:
    month: str  # YYYY-MM
    allocations: list[MonthAllocation] = field(default_factory=list)


@dataclass
class RoleSummary:
    role: Role
    score: float
    cap: float
    capped: bool


@dataclass
class CalculationResult:
    role_summary: list[RoleSummary]
    total_score: float
    month_details: list[MonthDetail]

    def summary_for(self, role: Role) -> RoleSummary:
        for s in self.role_summary:
            if s.role is role:
                return s
        raise KeyError(role)
