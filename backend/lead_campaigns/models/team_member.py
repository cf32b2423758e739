"""
Team member model - users of a company that can be assigned to campaigns.

Rows are synchronized from the identity service; this engine only reads them.
"""
import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime

from ..database import Base


class TeamMember(Base):
    """Company member available for campaign assignment."""

    __tablename__ = "team_members"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    company_id = Column(String(36), nullable=False, index=True)

    # Profile info
    display_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    role = Column(String(50), default="member")

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<TeamMember {self.display_name}>"
