"""
Unit tests for row normalization and tabular payload parsing.
"""
import io

import openpyxl
import pytest

from lead_campaigns.exceptions import UnsupportedImportFile
from lead_campaigns.schemas.csv_import import ColumnMapping
from lead_campaigns.schemas.lead import LeadCandidate, ManualLeadEntry
from lead_campaigns.services.column_mapper import detect_column_mapping
from lead_campaigns.services.record_normalizer import (
    normalize_manual_entry,
    normalize_row,
    split_identifiable,
)
from lead_campaigns.services.tabular_reader import parse_csv_text, parse_file_to_rows

pytestmark = pytest.mark.unit


class TestNormalizeRow:

    def test_mapped_fields_are_copied(self):
        mapping = ColumnMapping(name="Full Name", email="Mail", title="Role", notes="Notes")
        row = {"Full Name": "Ada Lovelace", "Mail": "ada@example.com", "Role": "CTO", "Notes": "Hot"}

        candidate = normalize_row(row, mapping)

        assert candidate.client_name == "Ada Lovelace"
        assert candidate.email == "ada@example.com"
        assert candidate.designation == "CTO"
        assert candidate.requirements == "Hot"

    def test_unmapped_and_missing_fields_are_empty_strings(self):
        mapping = ColumnMapping(name="Name", phone="Phone")

        candidate = normalize_row({"Name": "Ada"}, mapping)

        assert candidate.phone == ""
        assert candidate.company_name == ""
        assert candidate.location == ""
        assert candidate.social.linkedin is None

    def test_values_are_not_trimmed(self):
        candidate = normalize_row({"Name": "  Ada  "}, ColumnMapping(name="Name"))

        assert candidate.client_name == "  Ada  "

    def test_none_cells_become_empty(self):
        candidate = normalize_row({"Name": None}, ColumnMapping(name="Name"))

        assert candidate.client_name == ""


class TestNormalizeManualEntry:

    def test_linkedin_moves_under_social(self):
        entry = ManualLeadEntry(client_name="Ada", linkedin="https://linkedin.com/in/ada")

        candidate = normalize_manual_entry(entry)

        assert candidate.social.linkedin == "https://linkedin.com/in/ada"
        assert "linkedin" not in candidate.model_dump()

    def test_empty_linkedin_is_omitted(self):
        candidate = normalize_manual_entry(ManualLeadEntry(email="ada@example.com"))

        assert candidate.social.linkedin is None


class TestIdentifiable:

    def test_company_alone_is_not_identifiable(self):
        assert not LeadCandidate(company_name="Acme", phone="123").is_identifiable

    def test_name_or_email_is_enough(self):
        assert LeadCandidate(client_name="Ada").is_identifiable
        assert LeadCandidate(email="ada@example.com").is_identifiable

    def test_split_preserves_order_and_counts_drops(self):
        candidates = [
            LeadCandidate(client_name="A"),
            LeadCandidate(company_name="Acme"),
            LeadCandidate(email="b@example.com"),
        ]

        kept, dropped = split_identifiable(candidates)

        assert [c.client_name or c.email for c in kept] == ["A", "b@example.com"]
        assert dropped == 1


class TestParseCsv:

    def test_headers_and_rows(self):
        columns, rows = parse_csv_text("Name,Email\nAda,ada@example.com\nBob,bob@example.com\n")

        assert columns == ["Name", "Email"]
        assert rows == [
            {"Name": "Ada", "Email": "ada@example.com"},
            {"Name": "Bob", "Email": "bob@example.com"},
        ]

    def test_quoted_cells_keep_embedded_commas(self):
        columns, rows = parse_csv_text('Name,Company\n"Lovelace, Ada","Acme, Inc."\n')

        assert rows[0] == {"Name": "Lovelace, Ada", "Company": "Acme, Inc."}

    def test_bom_and_empty_rows_are_ignored(self):
        columns, rows = parse_csv_text("\ufeffName,Email\n,\nAda,\n")

        assert columns == ["Name", "Email"]
        assert rows == [{"Name": "Ada", "Email": ""}]

    def test_short_rows_are_padded(self):
        _, rows = parse_csv_text("Name,Email,Phone\nAda\n")

        assert rows == [{"Name": "Ada", "Email": "", "Phone": ""}]

    def test_empty_payload(self):
        assert parse_csv_text("") == ([], [])

    def test_unsupported_extension(self):
        with pytest.raises(UnsupportedImportFile):
            parse_file_to_rows("leads.pdf", b"%PDF")

    def test_csv_file_bytes(self):
        columns, rows = parse_file_to_rows("leads.csv", "Name\nZoë\n".encode("utf-8"))

        assert rows == [{"Name": "Zoë"}]

    def test_non_utf8_csv_is_rejected(self):
        with pytest.raises(UnsupportedImportFile):
            parse_file_to_rows("leads.csv", b"Name\n\xff\xfe\xfa\n")


def xlsx_bytes(*sheet_rows):
    wb = openpyxl.Workbook()
    ws = wb.active
    for row in sheet_rows:
        ws.append(list(row))
    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


class TestDuplicateHeaders:

    def test_csv_row_keeps_first_occurrence_value(self):
        columns, rows = parse_csv_text("Name,Email,Email\nAda,first@example.com,second@example.com\n")

        assert columns == ["Name", "Email", "Email"]
        assert rows == [{"Name": "Ada", "Email": "first@example.com"}]

    def test_candidate_gets_first_occurrence_value(self):
        columns, rows = parse_csv_text("Name,Email,Email\nAda,first@example.com,second@example.com\n")

        mapping = detect_column_mapping(columns)
        candidate = normalize_row(rows[0], mapping)

        assert mapping.email == "Email"
        assert candidate.email == "first@example.com"

    def test_row_with_only_later_duplicate_filled_is_skipped(self):
        _, rows = parse_csv_text("Email,Email\n,late@example.com\n")

        assert rows == []

    def test_excel_row_keeps_first_occurrence_value(self):
        content = xlsx_bytes(
            ("Name", "Email", "Email"),
            ("Ada", "first@example.com", "second@example.com"),
        )

        columns, rows = parse_file_to_rows("leads.xlsx", content)

        assert columns == ["Name", "Email", "Email"]
        assert rows == [{"Name": "Ada", "Email": "first@example.com"}]


class TestParseExcel:

    def test_cells_are_stringified_and_trimmed(self):
        content = xlsx_bytes(("Name", "Phone"), (" Ada ", 5550100))

        columns, rows = parse_file_to_rows("leads.xlsx", content)

        assert columns == ["Name", "Phone"]
        assert rows == [{"Name": "Ada", "Phone": "5550100"}]

    def test_unreadable_workbook_is_rejected(self):
        with pytest.raises(UnsupportedImportFile):
            parse_file_to_rows("leads.xlsx", b"not a zip")
