"""
Campaign lifecycle state machine.

    draft --publish--> active --pause--> paused --resume--> active
    active|paused --complete--> completed
    draft|active|paused|completed --archive--> archived   (terminal)
"""
import logging
from typing import Dict, Iterable, List, Tuple

from ..exceptions import (
    CampaignNotEditable,
    CampaignNotIngestible,
    InvalidTransition,
    PercentageImbalance,
)
from ..models.campaign import AssignmentRule, CampaignStatus
from ..schemas.campaign import Assignee, CampaignEvent
from .workload_distributor import percentage_balance

logger = logging.getLogger(__name__)

INITIAL_STATUS = CampaignStatus.DRAFT

TRANSITIONS: Dict[Tuple[CampaignStatus, CampaignEvent], CampaignStatus] = {
    (CampaignStatus.DRAFT, CampaignEvent.PUBLISH): CampaignStatus.ACTIVE,
    (CampaignStatus.ACTIVE, CampaignEvent.PAUSE): CampaignStatus.PAUSED,
    (CampaignStatus.PAUSED, CampaignEvent.RESUME): CampaignStatus.ACTIVE,
    (CampaignStatus.ACTIVE, CampaignEvent.COMPLETE): CampaignStatus.COMPLETED,
    (CampaignStatus.PAUSED, CampaignEvent.COMPLETE): CampaignStatus.COMPLETED,
    (CampaignStatus.DRAFT, CampaignEvent.ARCHIVE): CampaignStatus.ARCHIVED,
    (CampaignStatus.ACTIVE, CampaignEvent.ARCHIVE): CampaignStatus.ARCHIVED,
    (CampaignStatus.PAUSED, CampaignEvent.ARCHIVE): CampaignStatus.ARCHIVED,
    (CampaignStatus.COMPLETED, CampaignEvent.ARCHIVE): CampaignStatus.ARCHIVED,
}

EDITABLE_STATUSES = frozenset({CampaignStatus.DRAFT, CampaignStatus.PAUSED})
INGESTIBLE_STATUSES = frozenset({CampaignStatus.DRAFT, CampaignStatus.ACTIVE, CampaignStatus.PAUSED})
TERMINAL_STATUSES = frozenset({CampaignStatus.ARCHIVED})

STRUCTURAL_FIELDS = frozenset({
    "name",
    "acquisition_method",
    "lead_category",
    "tags",
    "assignees",
    "assignment_rule",
})


def next_status(status: CampaignStatus, event: CampaignEvent) -> CampaignStatus:
    """Resolve the status reached by applying event, or raise InvalidTransition."""
    status = CampaignStatus(status)
    event = CampaignEvent(event)
    try:
        return TRANSITIONS[(status, event)]
    except KeyError:
        logger.warning(f"Rejected lifecycle event '{event.value}' from '{status.value}'")
        raise InvalidTransition(status.value, event.value) from None


def allowed_events(status: CampaignStatus) -> List[CampaignEvent]:
    """Events that are legal from the given status."""
    status = CampaignStatus(status)
    return [event for (source, event) in TRANSITIONS if source == status]


def is_terminal(status: CampaignStatus) -> bool:
    return CampaignStatus(status) in TERMINAL_STATUSES


def can_ingest(status: CampaignStatus) -> bool:
    return CampaignStatus(status) in INGESTIBLE_STATUSES


def ensure_ingestible(status: CampaignStatus) -> None:
    """Raise CampaignNotIngestible unless leads may be added in this status."""
    if not can_ingest(status):
        raise CampaignNotIngestible(CampaignStatus(status).value)


def ensure_editable(status: CampaignStatus, fields: Iterable[str]) -> None:
    """
    Raise CampaignNotEditable if structural fields change outside draft/paused.

    Archived campaigns refuse every edit.
    """
    status = CampaignStatus(status)
    fields = set(fields)
    if status in TERMINAL_STATUSES and fields:
        raise CampaignNotEditable(status.value, fields)
    structural = STRUCTURAL_FIELDS.intersection(fields)
    if structural and status not in EDITABLE_STATUSES:
        raise CampaignNotEditable(status.value, structural)


def ensure_publishable(assignees: List[Assignee], rule: AssignmentRule) -> None:
    """Block publishing while manual percentages do not add up to 100."""
    balance = percentage_balance(assignees, AssignmentRule(rule))
    if balance is not None and not balance.balanced:
        raise PercentageImbalance(balance.total)
