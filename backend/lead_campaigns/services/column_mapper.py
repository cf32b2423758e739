"""
Column mapping inference for tabular lead sources.

Proposes which source column feeds each canonical lead field. The proposal is a
default only: callers may override any field before the import runs.
"""
import logging
from typing import Dict, List, Optional, Tuple

from ..exceptions import InvalidColumnMapping
from ..schemas.csv_import import ColumnMapping

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Ordered header patterns
# Fields are resolved top to bottom; a header containing any of a field's
# patterns (case-insensitive) is a match. Add new fields or locales here.
# ---------------------------------------------------------------------------
COLUMN_PATTERNS: List[Tuple[str, Tuple[str, ...]]] = [
    ("name", ("name", "full name", "client name", "contact name", "person")),
    ("company", ("company", "organization", "org")),
    ("email", ("email", "e-mail")),
    ("phone", ("phone", "mobile", "telephone", "cell")),
    ("title", ("title", "designation", "position", "role")),
    ("location", ("location", "city", "address", "country", "region")),
    ("notes", ("requirements", "notes", "comments", "description")),
]

CANONICAL_FIELDS = [field for field, _ in COLUMN_PATTERNS]


def _matches(header: str, patterns: Tuple[str, ...]) -> bool:
    normalized = header.lower().strip()
    return any(pattern in normalized for pattern in patterns)


def detect_column_mapping(headers: List[str]) -> ColumnMapping:
    """
    Propose a column mapping for the given headers.

    For each field, the first header (left to right) matching its patterns
    wins, unless an earlier field already claimed that header.
    """
    claimed: set = set()
    mapping: Dict[str, Optional[str]] = {}

    for field, patterns in COLUMN_PATTERNS:
        for index, header in enumerate(headers):
            if index in claimed:
                continue
            if _matches(header, patterns):
                mapping[field] = header
                claimed.add(index)
                break

    logger.debug(f"Detected column mapping {mapping} for headers {headers}")
    return ColumnMapping(**mapping)


def apply_mapping_overrides(
    proposed: ColumnMapping,
    overrides: Dict[str, Optional[str]],
    headers: List[str],
) -> ColumnMapping:
    """
    Replace proposed fields with user choices.

    An override value of None unmaps the field. Unknown fields and headers
    missing from the source are rejected.
    """
    merged = proposed.model_dump()
    for field, header in overrides.items():
        if field not in CANONICAL_FIELDS:
            raise InvalidColumnMapping(f"Unknown lead field '{field}'")
        if header is not None and header not in headers:
            raise InvalidColumnMapping(f"Column '{header}' is not present in the source")
        merged[field] = header
    return ColumnMapping(**merged)


def validate_column_mapping(mapping: ColumnMapping, headers: List[str]) -> ColumnMapping:
    """Ensure every mapped header exists in the source."""
    for field, header in mapping.mapped_fields().items():
        if header not in headers:
            raise InvalidColumnMapping(
                f"Column '{header}' mapped to '{field}' is not present in the source"
            )
    return mapping
