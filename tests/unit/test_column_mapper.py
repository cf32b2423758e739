"""
Unit tests for column mapping inference.
"""
import pytest

from lead_campaigns.exceptions import InvalidColumnMapping
from lead_campaigns.schemas.csv_import import ColumnMapping
from lead_campaigns.services.column_mapper import (
    CANONICAL_FIELDS,
    apply_mapping_overrides,
    detect_column_mapping,
    validate_column_mapping,
)

pytestmark = pytest.mark.unit


class TestDetectColumnMapping:

    def test_typical_export_headers(self):
        mapping = detect_column_mapping(["Full Name", "Company", "Email Address", "Notes"])

        assert mapping == ColumnMapping(
            name="Full Name",
            company="Company",
            email="Email Address",
            notes="Notes",
        )
        assert mapping.phone is None
        assert mapping.title is None
        assert mapping.location is None

    def test_empty_headers_leave_everything_unmapped(self):
        mapping = detect_column_mapping([])

        assert mapping.mapped_fields() == {}

    def test_matching_is_case_insensitive(self):
        mapping = detect_column_mapping(["E-MAIL", "MOBILE", "DESIGNATION", "CITY"])

        assert mapping.email == "E-MAIL"
        assert mapping.phone == "MOBILE"
        assert mapping.title == "DESIGNATION"
        assert mapping.location == "CITY"

    def test_first_matching_header_wins(self):
        mapping = detect_column_mapping(["Work Email", "Personal Email"])

        assert mapping.email == "Work Email"

    def test_duplicate_headers_first_occurrence_wins(self):
        mapping = detect_column_mapping(["Email", "Email"])

        assert mapping.email == "Email"

    def test_header_is_claimed_by_earlier_field_only(self):
        # "Company Name" matches the name patterns first, so company falls
        # through to the next matching header
        mapping = detect_column_mapping(["Company Name", "Organization"])

        assert mapping.name == "Company Name"
        assert mapping.company == "Organization"

    def test_mapping_is_idempotent(self):
        headers = ["Contact Name", "Org", "Phone", "Role", "Country", "Comments"]

        assert detect_column_mapping(headers) == detect_column_mapping(list(headers))

    def test_reordering_headers_keeps_field_assignment(self):
        forward = detect_column_mapping(["Name", "Phone", "Email"])
        backward = detect_column_mapping(["Email", "Phone", "Name"])

        assert forward == backward

    def test_unrelated_headers_are_ignored(self):
        mapping = detect_column_mapping(["Foo", "Bar"])

        assert mapping.mapped_fields() == {}

    def test_canonical_fields_are_ordered(self):
        assert CANONICAL_FIELDS == ["name", "company", "email", "phone", "title", "location", "notes"]


class TestMappingOverrides:

    def test_override_replaces_proposed_column(self):
        headers = ["Name", "Primary Contact Mail", "Email"]
        proposed = detect_column_mapping(headers)

        mapping = apply_mapping_overrides(proposed, {"email": "Primary Contact Mail"}, headers)

        assert mapping.email == "Primary Contact Mail"
        assert mapping.name == "Name"

    def test_override_with_none_unmaps_field(self):
        headers = ["Name", "Email"]
        mapping = apply_mapping_overrides(detect_column_mapping(headers), {"email": None}, headers)

        assert mapping.email is None

    def test_unknown_field_is_rejected(self):
        with pytest.raises(InvalidColumnMapping):
            apply_mapping_overrides(ColumnMapping(), {"fax": "Fax"}, ["Fax"])

    def test_missing_header_is_rejected(self):
        with pytest.raises(InvalidColumnMapping):
            apply_mapping_overrides(ColumnMapping(), {"email": "Mail"}, ["Email"])

    def test_validate_rejects_absent_header(self):
        with pytest.raises(InvalidColumnMapping):
            validate_column_mapping(ColumnMapping(name="Name"), ["Email"])
