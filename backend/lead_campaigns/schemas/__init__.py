"""
Pydantic schemas for request/response validation.
"""
from .campaign import (
    Assignee,
    CampaignCreate,
    CampaignEvent,
    CampaignFilter,
    CampaignResponse,
    CampaignStats,
    CampaignStatsSummary,
    CampaignUpdate,
    StatusEventRequest,
    TeamMemberResponse,
)
from .lead import (
    BulkLeadsRequest,
    CreateLeadsResult,
    CreateLeadsSummary,
    LeadCandidate,
    LeadResponse,
    LeadSocial,
    ManualLeadEntry,
)
from .csv_import import (
    ColumnMapping,
    ImportPreviewResponse,
    ImportProgress,
    ImportRequest,
    ImportResult,
)

__all__ = [
    "Assignee", "CampaignCreate", "CampaignEvent", "CampaignFilter", "CampaignResponse",
    "CampaignStats", "CampaignStatsSummary", "CampaignUpdate", "StatusEventRequest",
    "TeamMemberResponse",
    "BulkLeadsRequest", "CreateLeadsResult", "CreateLeadsSummary", "LeadCandidate",
    "LeadResponse", "LeadSocial", "ManualLeadEntry",
    "ColumnMapping", "ImportPreviewResponse", "ImportProgress", "ImportRequest", "ImportResult",
]
