"""
Campaign schemas for API validation.
"""
from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict
from pydantic import BaseModel, Field, field_validator

from ..models.campaign import (
    AcquisitionMethod,
    AssigneeRole,
    AssignmentRule,
    CampaignPriority,
    CampaignStatus,
)


class CampaignEvent(str, Enum):
    """Lifecycle events accepted by the status endpoint."""
    PUBLISH = "publish"
    PAUSE = "pause"
    RESUME = "resume"
    COMPLETE = "complete"
    ARCHIVE = "archive"


class SyncFrequency(str, Enum):
    ONE_TIME = "one-time"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class ConnectionStatus(str, Enum):
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"
    ERROR = "error"


class ThirdPartyConfig(BaseModel):
    """Sync settings for third-party-sync campaigns."""
    provider: Optional[str] = None
    sync_frequency: Optional[SyncFrequency] = None
    last_sync_at: Optional[datetime] = None
    connection_status: Optional[ConnectionStatus] = None


class Assignee(BaseModel):
    """Team member attached to a campaign."""
    user_ref: str
    role: AssigneeRole = AssigneeRole.MEMBER
    percentage: int = Field(0, ge=0, le=100)

    class Config:
        from_attributes = True


class CampaignStats(BaseModel):
    """Lead counts per sub-status. Read-only for the engine."""
    total: int = 0
    cold: int = 0
    warm: int = 0
    qualified: int = 0
    active: int = 0
    dead: int = 0
    converted: int = 0


def _unique_tags(tags: Optional[List[str]]) -> Optional[List[str]]:
    if tags is None:
        return None
    seen: List[str] = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in seen:
            seen.append(tag)
    return seen


class CampaignBase(BaseModel):
    """Base schema for Campaign."""
    name: str = Field(..., min_length=1, max_length=255)
    acquisition_method: AcquisitionMethod = AcquisitionMethod.MANUAL
    lead_category: str = ""
    tags: List[str] = Field(default_factory=list)
    source_notes: str = ""
    expected_count: int = Field(0, ge=0)
    priority: CampaignPriority = CampaignPriority.MEDIUM
    assignment_rule: AssignmentRule = AssignmentRule.MANUAL
    external_event_ref: Optional[str] = None
    source_file_name: Optional[str] = None
    third_party_config: Optional[ThirdPartyConfig] = None

    @field_validator("tags")
    @classmethod
    def dedupe_tags(cls, v):
        return _unique_tags(v)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v):
        if not v.strip():
            raise ValueError("Campaign name must not be blank")
        return v


class CampaignCreate(CampaignBase):
    """Schema for creating a new Campaign."""
    assignees: List[Assignee] = Field(default_factory=list)
    auto_distribute: bool = True


# Columns that always hold a value; an explicit null in an update is refused
NON_NULLABLE_UPDATE_FIELDS = (
    "name",
    "acquisition_method",
    "lead_category",
    "tags",
    "source_notes",
    "expected_count",
    "priority",
    "assignment_rule",
    "assignees",
)


class CampaignUpdate(BaseModel):
    """Schema for updating a Campaign. Unset fields are left untouched."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    acquisition_method: Optional[AcquisitionMethod] = None
    lead_category: Optional[str] = None
    tags: Optional[List[str]] = None
    source_notes: Optional[str] = None
    expected_count: Optional[int] = Field(None, ge=0)
    priority: Optional[CampaignPriority] = None
    assignment_rule: Optional[AssignmentRule] = None
    assignees: Optional[List[Assignee]] = None
    external_event_ref: Optional[str] = None
    source_file_name: Optional[str] = None
    third_party_config: Optional[ThirdPartyConfig] = None

    @field_validator("tags")
    @classmethod
    def dedupe_tags(cls, v):
        return _unique_tags(v)

    @field_validator(*NON_NULLABLE_UPDATE_FIELDS, mode="before")
    @classmethod
    def reject_null(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v):
        if v is not None and not v.strip():
            raise ValueError("Campaign name must not be blank")
        return v


class PercentageBalance(BaseModel):
    """Advisory state of manual assignee percentages."""
    total: int
    delta: int
    balanced: bool


class CampaignResponse(CampaignBase):
    """Schema for Campaign API response."""
    id: str
    company_id: str
    owner_id: str
    status: CampaignStatus = CampaignStatus.DRAFT
    assignees: List[Assignee] = Field(default_factory=list)
    stats: CampaignStats = Field(default_factory=CampaignStats)
    percentage_balance: Optional[PercentageBalance] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class StatusEventRequest(BaseModel):
    """Request body for a lifecycle transition."""
    event: CampaignEvent


class CampaignFilter(BaseModel):
    """Filters for listing campaigns. 'all' means no filter."""
    status: Optional[str] = None
    method: Optional[str] = None
    search_text: Optional[str] = None
    external_event_ref: Optional[str] = None


class CampaignStatsSummary(BaseModel):
    """Company-wide campaign counters."""
    total: int = 0
    active: int = 0
    draft: int = 0
    completed: int = 0
    total_leads: int = 0
    method_breakdown: Dict[str, int] = Field(default_factory=dict)


class TeamMemberResponse(BaseModel):
    """Assignable team member."""
    id: str
    display_name: str
    role: str

    class Config:
        from_attributes = True
