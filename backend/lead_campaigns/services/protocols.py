"""
Persistence boundary interfaces.

The import pipeline only needs LeadSubmitter; CampaignStoreProtocol covers the
whole set of collaborator operations the routers use.
"""
from typing import TYPE_CHECKING, List, Optional, Protocol, Tuple

from ..context import CallerContext
from ..schemas.campaign import (
    CampaignCreate,
    CampaignEvent,
    CampaignFilter,
    CampaignResponse,
    CampaignStatsSummary,
    CampaignUpdate,
    TeamMemberResponse,
)
from ..schemas.lead import CreateLeadsResult, LeadCandidate, LeadResponse

if TYPE_CHECKING:
    from .campaign_aggregate import CampaignAggregate


class LeadSubmitter(Protocol):
    """Batch-submission primitive consumed by the import pipeline."""

    async def create_leads(
        self, campaign_id: str, candidates: List[LeadCandidate]
    ) -> CreateLeadsResult:
        """Persist candidates; return counts and the refreshed campaign"""
        ...


class CampaignStoreProtocol(LeadSubmitter, Protocol):
    """Collaborator operations for campaigns, leads and team members"""

    async def get_aggregate(self, context: CallerContext, campaign_id: str) -> "CampaignAggregate":
        ...

    async def list_campaigns(
        self, context: CallerContext, filters: Optional[CampaignFilter] = None
    ) -> List[CampaignResponse]:
        ...

    async def get_campaign(self, context: CallerContext, campaign_id: str) -> CampaignResponse:
        ...

    async def get_campaign_stats(self, context: CallerContext) -> CampaignStatsSummary:
        ...

    async def create_campaign(
        self, context: CallerContext, draft: CampaignCreate
    ) -> CampaignResponse:
        ...

    async def update_campaign(
        self, context: CallerContext, campaign_id: str, update: CampaignUpdate
    ) -> CampaignResponse:
        ...

    async def set_campaign_status(
        self, context: CallerContext, campaign_id: str, event: CampaignEvent
    ) -> CampaignResponse:
        ...

    async def duplicate_campaign(self, context: CallerContext, campaign_id: str) -> CampaignResponse:
        ...

    async def delete_campaign(self, context: CallerContext, campaign_id: str) -> None:
        ...

    async def list_team_members(self, context: CallerContext) -> List[TeamMemberResponse]:
        ...

    async def list_leads(self, context: CallerContext, campaign_id: str) -> List[LeadResponse]:
        ...

    async def list_campaigns_by_event(
        self, context: CallerContext, event_ref: str
    ) -> Tuple[List[CampaignResponse], List[LeadResponse]]:
        ...
