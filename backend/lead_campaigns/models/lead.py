"""
Lead model - represents a contact acquired through a campaign.
"""
import uuid
from datetime import datetime
from enum import Enum
from sqlalchemy import Column, String, Boolean, DateTime, Text, JSON
from sqlalchemy.orm import relationship

from ..database import Base
from .campaign import campaign_leads


class LeadStatus(str, Enum):
    """CRM status for leads."""
    COLD = "Cold Lead"
    WARM = "Warm Lead"
    QUALIFIED = "Qualified (SQL)"
    ACTIVE = "Active"
    DEAD = "Dead Lead"


# Campaign stats bucket for each lead status
STATUS_STATS_BUCKET = {
    LeadStatus.COLD: "cold",
    LeadStatus.WARM: "warm",
    LeadStatus.QUALIFIED: "qualified",
    LeadStatus.ACTIVE: "active",
    LeadStatus.DEAD: "dead",
}


class Lead(Base):
    """Lead directory entry."""

    __tablename__ = "leads"

    # Primary key
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # Ownership scope
    company_id = Column(String(36), nullable=False, index=True)
    created_by = Column(String(36), nullable=True)

    # Contact info
    client_name = Column(String(200), default="")
    company_name = Column(String(255), default="")
    email = Column(String(255), default="", index=True)
    phone = Column(String(50), default="")
    designation = Column(String(255), default="")
    location = Column(String(255), default="")
    requirements = Column(Text, default="")
    social = Column(JSON, default=dict)  # {"linkedin": "..."}

    # CRM Status
    status = Column(String(30), default=LeadStatus.COLD.value)
    converted_to_client = Column(Boolean, default=False)

    campaigns = relationship("LeadCampaign", secondary=campaign_leads, back_populates="leads")

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Lead {self.client_name} - {self.company_name}>"

    @property
    def display_name(self) -> str:
        return self.client_name or self.email or "Unknown"
