"""
Lead schemas for API validation.
"""
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field

from .campaign import CampaignResponse


class LeadSocial(BaseModel):
    """Social profile links of a lead."""
    linkedin: Optional[str] = None


class LeadCandidate(BaseModel):
    """
    Normalized record awaiting submission.

    Every field is always present; missing values are empty strings.
    """
    client_name: str = ""
    company_name: str = ""
    email: str = ""
    phone: str = ""
    designation: str = ""
    location: str = ""
    requirements: str = ""
    social: LeadSocial = Field(default_factory=LeadSocial)

    @property
    def is_identifiable(self) -> bool:
        """A candidate needs a client name or an email to become a lead."""
        return bool(self.client_name or self.email)


class ManualLeadEntry(BaseModel):
    """Single lead typed in by a user."""
    client_name: str = ""
    company_name: str = ""
    email: str = ""
    phone: str = ""
    designation: str = ""
    location: str = ""
    requirements: str = ""
    linkedin: str = ""


class BulkLeadsRequest(BaseModel):
    """Already-extracted records (scrape, third-party sync, API clients)."""
    leads: List[LeadCandidate] = Field(..., min_length=1)
    batch_size: Optional[int] = Field(None, ge=1, le=500)


class LeadErrorDetail(BaseModel):
    email: str = ""
    error: str


class CreateLeadsSummary(BaseModel):
    """Outcome of one createLeads submission."""
    total: int = 0
    created: int = 0
    errors: int = 0
    error_details: List[LeadErrorDetail] = Field(default_factory=list)


class CreateLeadsResult(BaseModel):
    """Response of the persistence boundary's createLeads operation."""
    summary: CreateLeadsSummary
    campaign: CampaignResponse


class LeadResponse(BaseModel):
    """Schema for Lead API response."""
    id: str
    client_name: str = ""
    company_name: str = ""
    email: str = ""
    phone: str = ""
    designation: str = ""
    location: str = ""
    requirements: str = ""
    social: LeadSocial = Field(default_factory=LeadSocial)
    status: str
    converted_to_client: bool = False
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
