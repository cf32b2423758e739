"""
Tabular import schemas for API validation.
"""
from typing import Optional, List, Dict
from pydantic import BaseModel, Field

from .campaign import CampaignStats
from .lead import LeadCandidate


class ColumnMapping(BaseModel):
    """Canonical lead field -> source column header (None = unmapped)."""
    name: Optional[str] = None
    company: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    title: Optional[str] = None
    location: Optional[str] = None
    notes: Optional[str] = None

    def mapped_fields(self) -> Dict[str, str]:
        return {field: header for field, header in self.model_dump().items() if header}


class ImportPreviewResponse(BaseModel):
    """Response for the import preview endpoint."""
    file_name: Optional[str] = None
    total_rows: int
    skipped_rows: int
    importable_rows: int
    detected_columns: List[str]
    column_mapping: ColumnMapping
    preview_rows: List[LeadCandidate]
    rows: List[Dict[str, str]] = Field(default_factory=list)


class ImportRequest(BaseModel):
    """Request to import parsed tabular rows into a campaign."""
    columns: List[str]
    rows: List[Dict[str, str]]
    column_mapping: Optional[ColumnMapping] = None  # None = use the proposed mapping
    file_name: Optional[str] = None
    batch_size: Optional[int] = Field(None, ge=1, le=500)


class ImportProgress(BaseModel):
    """Progress report emitted after every batch."""
    total: int
    processed: int
    created: int
    errors: int

    @property
    def done(self) -> bool:
        return self.processed >= self.total


class ImportResult(BaseModel):
    """Final counts of an import call."""
    total: int = 0
    skipped_count: int = 0
    created_count: int = 0
    error_count: int = 0
    campaign_stats: CampaignStats = Field(default_factory=CampaignStats)
