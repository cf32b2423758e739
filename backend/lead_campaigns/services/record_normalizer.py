"""
Conversion of raw rows and manual entries into lead candidates.
"""
from typing import Any, Dict, Iterable, List, Tuple

from ..schemas.csv_import import ColumnMapping
from ..schemas.lead import LeadCandidate, LeadSocial, ManualLeadEntry

# Canonical mapping field -> candidate attribute
FIELD_TO_CANDIDATE = {
    "name": "client_name",
    "company": "company_name",
    "email": "email",
    "phone": "phone",
    "title": "designation",
    "location": "location",
    "notes": "requirements",
}


def _cell(row: Dict[str, Any], header: str) -> str:
    value = row.get(header)
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def normalize_row(row: Dict[str, Any], mapping: ColumnMapping) -> LeadCandidate:
    """
    Build a candidate from one tabular row.

    Unmapped fields and cells missing from the row become empty strings.
    Values are taken as-is; no trimming or casing is applied.
    """
    values: Dict[str, str] = {attr: "" for attr in FIELD_TO_CANDIDATE.values()}
    for field, header in mapping.mapped_fields().items():
        values[FIELD_TO_CANDIDATE[field]] = _cell(row, header)
    return LeadCandidate(**values)


def normalize_manual_entry(entry: ManualLeadEntry) -> LeadCandidate:
    """Build a candidate from a manual entry; the LinkedIn URL moves under social."""
    data = entry.model_dump(exclude={"linkedin"})
    social = LeadSocial(linkedin=entry.linkedin or None)
    return LeadCandidate(**data, social=social)


def normalize_rows(
    rows: Iterable[Dict[str, Any]],
    mapping: ColumnMapping,
) -> List[LeadCandidate]:
    """Normalize every row of a source with the same mapping."""
    return [normalize_row(row, mapping) for row in rows]


def split_identifiable(
    candidates: Iterable[LeadCandidate],
) -> Tuple[List[LeadCandidate], int]:
    """Return (identifiable candidates in order, number of dropped candidates)."""
    kept: List[LeadCandidate] = []
    dropped = 0
    for candidate in candidates:
        if candidate.is_identifiable:
            kept.append(candidate)
        else:
            dropped += 1
    return kept, dropped
