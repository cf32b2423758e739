"""
Lead campaign model - a stateful container for acquired leads.
"""
import uuid
from datetime import datetime
from enum import Enum
from sqlalchemy import Column, String, DateTime, Text, ForeignKey, Integer, JSON, Table
from sqlalchemy.orm import relationship

from ..database import Base


class CampaignStatus(str, Enum):
    """Lifecycle status of a campaign."""
    DRAFT = "draft"
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"
    ARCHIVED = "archived"


class AcquisitionMethod(str, Enum):
    """How leads enter the campaign."""
    MANUAL = "manual"
    TABULAR_IMPORT = "tabular-import"
    SCRAPE = "scrape"
    THIRD_PARTY_SYNC = "third-party-sync"


class CampaignPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class AssignmentRule(str, Enum):
    """How incoming leads are spread across assignees."""
    MANUAL = "manual"
    ROUND_ROBIN = "round-robin"
    EQUAL = "equal"
    TERRITORY = "territory"
    SCORE = "score"


class AssigneeRole(str, Enum):
    OWNER = "owner"
    MEMBER = "member"
    VIEWER = "viewer"


# Leads can belong to several campaigns (an existing lead is linked, not copied)
campaign_leads = Table(
    "campaign_leads",
    Base.metadata,
    Column("campaign_id", String(36), ForeignKey("lead_campaigns.id", ondelete="CASCADE"), primary_key=True),
    Column("lead_id", String(36), ForeignKey("leads.id", ondelete="CASCADE"), primary_key=True),
)


def empty_stats() -> dict:
    return {
        "total": 0,
        "cold": 0,
        "warm": 0,
        "qualified": 0,
        "active": 0,
        "dead": 0,
        "converted": 0,
    }


class LeadCampaign(Base):
    """Lead acquisition campaign."""

    __tablename__ = "lead_campaigns"

    # Primary key
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # Ownership scope
    company_id = Column(String(36), nullable=False, index=True)
    owner_id = Column(String(36), nullable=False)

    # Configuration
    name = Column(String(255), nullable=False)
    acquisition_method = Column(String(30), nullable=False, default=AcquisitionMethod.MANUAL.value)
    lead_category = Column(String(255), nullable=False, default="")
    tags = Column(JSON, default=list)
    source_notes = Column(Text, default="")
    expected_count = Column(Integer, default=0)
    priority = Column(String(10), default=CampaignPriority.MEDIUM.value)
    status = Column(String(20), default=CampaignStatus.DRAFT.value, index=True)
    assignment_rule = Column(String(20), default=AssignmentRule.MANUAL.value)

    # Link to an external event / trade show (opaque id)
    external_event_ref = Column(String(64), nullable=True, index=True)

    # Method-specific metadata
    source_file_name = Column(String(255), nullable=True)
    third_party_config = Column(JSON, nullable=True)  # provider, sync frequency, last sync, connection

    # Derived counters, recomputed after every lead submission
    stats = Column(JSON, default=empty_stats)

    assignees = relationship(
        "CampaignAssignee",
        back_populates="campaign",
        order_by="CampaignAssignee.position",
        cascade="all, delete-orphan",
    )
    leads = relationship("Lead", secondary=campaign_leads, back_populates="campaigns")

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<LeadCampaign {self.name} ({self.status})>"


class CampaignAssignee(Base):
    """Team member attached to a campaign with a share of the workload."""

    __tablename__ = "campaign_assignees"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    campaign_id = Column(String(36), ForeignKey("lead_campaigns.id", ondelete="CASCADE"), nullable=False)
    campaign = relationship("LeadCampaign", back_populates="assignees")

    user_ref = Column(String(36), nullable=False)
    role = Column(String(10), default=AssigneeRole.MEMBER.value)
    percentage = Column(Integer, default=0)
    position = Column(Integer, default=0)  # Order in which the assignee was added

    def __repr__(self):
        return f"<CampaignAssignee {self.user_ref} {self.percentage}%>"
