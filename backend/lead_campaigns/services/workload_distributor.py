"""
Workload distribution across campaign assignees.

Auto-distribution always yields shares summing to exactly 100; earlier
assignees receive the rounding surplus. Manual overrides are clamped but
never rebalanced, so an imbalance is reported rather than corrected.
"""
from typing import List, Optional

from ..models.campaign import AssigneeRole, AssignmentRule
from ..schemas.campaign import Assignee, PercentageBalance


def distribute(assignees: List[Assignee]) -> List[Assignee]:
    """Return a copy of the assignees with equal integer shares."""
    n = len(assignees)
    if n == 0:
        return list(assignees)

    base, remainder = divmod(100, n)
    return [
        assignee.model_copy(update={"percentage": base + 1 if i < remainder else base})
        for i, assignee in enumerate(assignees)
    ]


def set_percentage(assignees: List[Assignee], user_ref: str, value: int) -> List[Assignee]:
    """Set one assignee's share, clamped to [0, 100]. Others are untouched."""
    clamped = max(0, min(100, int(value)))
    return [
        a.model_copy(update={"percentage": clamped}) if a.user_ref == user_ref else a
        for a in assignees
    ]


def add_assignee(
    assignees: List[Assignee],
    user_ref: str,
    role: AssigneeRole = AssigneeRole.MEMBER,
    rebalance: bool = True,
) -> List[Assignee]:
    """Append a member (no-op if already present) and redistribute by default."""
    if any(a.user_ref == user_ref for a in assignees):
        return list(assignees)
    updated = list(assignees) + [Assignee(user_ref=user_ref, role=role, percentage=0)]
    return distribute(updated) if rebalance else updated


def remove_assignee(
    assignees: List[Assignee],
    user_ref: str,
    rebalance: bool = True,
) -> List[Assignee]:
    """Drop a member and redistribute by default."""
    updated = [a for a in assignees if a.user_ref != user_ref]
    return distribute(updated) if rebalance else updated


def toggle_assignee(
    assignees: List[Assignee],
    user_ref: str,
    role: AssigneeRole = AssigneeRole.MEMBER,
) -> List[Assignee]:
    """Add the member if absent, remove it otherwise; shares are redistributed."""
    if any(a.user_ref == user_ref for a in assignees):
        return remove_assignee(assignees, user_ref)
    return add_assignee(assignees, user_ref, role)


def percentage_balance(
    assignees: List[Assignee],
    rule: AssignmentRule,
) -> Optional[PercentageBalance]:
    """
    Advisory balance check.

    Only meaningful for the manual rule with at least one assignee; returns
    None otherwise.
    """
    if rule != AssignmentRule.MANUAL or not assignees:
        return None
    total = sum(a.percentage for a in assignees)
    return PercentageBalance(total=total, delta=100 - total, balanced=total == 100)
