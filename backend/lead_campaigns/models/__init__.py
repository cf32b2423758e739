"""
SQLAlchemy models for the lead acquisition campaign engine.
"""
from .campaign import (
    LeadCampaign,
    CampaignAssignee,
    CampaignStatus,
    AcquisitionMethod,
    AssignmentRule,
    AssigneeRole,
    CampaignPriority,
)
from .lead import Lead, LeadStatus
from .team_member import TeamMember

__all__ = [
    "LeadCampaign",
    "CampaignAssignee",
    "CampaignStatus",
    "AcquisitionMethod",
    "AssignmentRule",
    "AssigneeRole",
    "CampaignPriority",
    "Lead",
    "LeadStatus",
    "TeamMember",
]
