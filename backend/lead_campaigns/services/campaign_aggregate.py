"""
Campaign aggregate: metadata, assignees and stats of one campaign, with the
lifecycle and workload rules applied to every change.
"""
import logging
from typing import List, Optional

from ..context import CallerContext
from ..exceptions import PermissionDenied
from ..models.campaign import AssigneeRole, CampaignStatus
from ..schemas.campaign import (
    Assignee,
    CampaignCreate,
    CampaignEvent,
    CampaignResponse,
    CampaignStats,
    CampaignUpdate,
    PercentageBalance,
)
from . import campaign_lifecycle as lifecycle
from . import workload_distributor as workload

logger = logging.getLogger(__name__)


class CampaignAggregate:
    """In-memory view of a campaign guarded by its lifecycle."""

    def __init__(self, campaign: CampaignResponse):
        self._campaign = campaign

    @property
    def id(self) -> str:
        return self._campaign.id

    @property
    def status(self) -> CampaignStatus:
        return self._campaign.status

    @property
    def assignees(self) -> List[Assignee]:
        return list(self._campaign.assignees)

    @property
    def stats(self) -> CampaignStats:
        return self._campaign.stats

    @property
    def percentage_balance(self) -> Optional[PercentageBalance]:
        return workload.percentage_balance(self._campaign.assignees, self._campaign.assignment_rule)

    def to_response(self) -> CampaignResponse:
        return self._campaign.model_copy(update={"percentage_balance": self.percentage_balance})

    # ===== AUTHORIZATION =====

    def can_manage(self, context: CallerContext) -> bool:
        """Owner, owner-role assignees and admins of the owning company."""
        if context.company_id != self._campaign.company_id:
            return False
        if context.is_admin or context.user_id == self._campaign.owner_id:
            return True
        return any(
            a.user_ref == context.user_id and a.role == AssigneeRole.OWNER
            for a in self._campaign.assignees
        )

    def ensure_manageable(self, context: CallerContext) -> None:
        if not self.can_manage(context):
            raise PermissionDenied(
                f"User {context.user_id} may not manage campaign {self.id}"
            )

    # ===== EDITS =====

    def apply_update(self, update: CampaignUpdate) -> CampaignResponse:
        """Apply the set fields of an update, refusing gated edits."""
        changes = update.model_dump(exclude_unset=True)
        lifecycle.ensure_editable(self.status, changes.keys())
        if "assignees" in changes:
            changes["assignees"] = list(update.assignees or [])
        if "third_party_config" in changes:
            changes["third_party_config"] = update.third_party_config
        self._campaign = self._campaign.model_copy(update=changes)
        return self.to_response()

    def _set_assignees(self, assignees: List[Assignee]) -> None:
        lifecycle.ensure_editable(self.status, {"assignees"})
        self._campaign = self._campaign.model_copy(update={"assignees": assignees})

    def add_assignee(self, user_ref: str, role: AssigneeRole = AssigneeRole.MEMBER) -> None:
        self._set_assignees(workload.add_assignee(self._campaign.assignees, user_ref, role))

    def remove_assignee(self, user_ref: str) -> None:
        self._set_assignees(workload.remove_assignee(self._campaign.assignees, user_ref))

    def set_assignee_percentage(self, user_ref: str, value: int) -> None:
        self._set_assignees(workload.set_percentage(self._campaign.assignees, user_ref, value))

    def auto_distribute(self) -> None:
        self._set_assignees(workload.distribute(self._campaign.assignees))

    # ===== LIFECYCLE =====

    def apply_event(self, event: CampaignEvent) -> CampaignStatus:
        """Move to the next status; publishing requires balanced manual shares."""
        new_status = lifecycle.next_status(self.status, event)
        if CampaignEvent(event) == CampaignEvent.PUBLISH:
            lifecycle.ensure_publishable(self._campaign.assignees, self._campaign.assignment_rule)

        logger.info(
            f"Campaign {self.id}: {self.status.value} -> {new_status.value} "
            f"({CampaignEvent(event).value})"
        )
        self._campaign = self._campaign.model_copy(update={"status": new_status})
        return new_status

    def ensure_ingestible(self) -> None:
        lifecycle.ensure_ingestible(self.status)

    # ===== STATS =====

    def replace_stats(self, stats: CampaignStats) -> None:
        """Stats are always replaced wholesale from the persistence boundary."""
        self._campaign = self._campaign.model_copy(update={"stats": stats.model_copy()})

    # ===== DUPLICATION =====

    def clone_configuration(self) -> CampaignCreate:
        """Configuration for a copy: new draft, same settings, no leads or stats."""
        data = self._campaign.model_dump(
            include={
                "acquisition_method",
                "lead_category",
                "tags",
                "source_notes",
                "expected_count",
                "priority",
                "assignment_rule",
                "external_event_ref",
                "source_file_name",
                "third_party_config",
                "assignees",
            }
        )
        data["name"] = f"{self._campaign.name} (Copy)"
        return CampaignCreate(**data, auto_distribute=False)


def ensure_owner_first(owner_ref: str, assignees: List[Assignee]) -> List[Assignee]:
    """Creator always leads the assignee list as owner; repeats of the creator are dropped."""
    owner = next((a for a in assignees if a.user_ref == owner_ref), None)
    percentage = owner.percentage if owner else 0
    others = [a for a in assignees if a.user_ref != owner_ref]
    return [Assignee(user_ref=owner_ref, role=AssigneeRole.OWNER, percentage=percentage)] + others


def new_campaign_assignees(owner_ref: str, draft: CampaignCreate) -> List[Assignee]:
    """Initial assignee list of a new campaign."""
    assignees = ensure_owner_first(owner_ref, draft.assignees)
    if draft.auto_distribute:
        assignees = workload.distribute(assignees)
    return assignees
