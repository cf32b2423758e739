"""
Test data factories shared by every test layer.
"""
import uuid
from typing import List

from lead_campaigns.models.campaign import AssigneeRole, AssignmentRule, CampaignStatus
from lead_campaigns.schemas.campaign import Assignee, CampaignResponse, CampaignStats
from lead_campaigns.schemas.lead import CreateLeadsResult, CreateLeadsSummary, LeadCandidate
from lead_campaigns.services.campaign_aggregate import CampaignAggregate

COMPANY_ID = "company-1"
OWNER_ID = "user-owner"


def make_campaign(**overrides) -> CampaignResponse:
    data = {
        "id": str(uuid.uuid4()),
        "company_id": COMPANY_ID,
        "owner_id": OWNER_ID,
        "name": "Trade show follow-up",
        "lead_category": "exhibitor",
        "status": CampaignStatus.DRAFT,
        "assignment_rule": AssignmentRule.MANUAL,
        "assignees": [Assignee(user_ref=OWNER_ID, role=AssigneeRole.OWNER, percentage=100)],
    }
    data.update(overrides)
    return CampaignResponse(**data)


def make_aggregate(**overrides) -> CampaignAggregate:
    return CampaignAggregate(make_campaign(**overrides))


def make_candidates(count: int, start: int = 0) -> List[LeadCandidate]:
    return [
        LeadCandidate(client_name=f"Contact {i}", email=f"contact{i}@example.com")
        for i in range(start, start + count)
    ]


def make_create_result(created: int, errors: int = 0, total_leads: int = 0) -> CreateLeadsResult:
    return CreateLeadsResult(
        summary=CreateLeadsSummary(total=created + errors, created=created, errors=errors),
        campaign=make_campaign(stats=CampaignStats(total=total_leads, cold=total_leads)),
    )
