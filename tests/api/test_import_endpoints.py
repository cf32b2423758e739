"""
API tests for the tabular import endpoints.
"""
import json

import pytest

pytestmark = pytest.mark.api

BASE = "/api/lead-campaigns"

CSV_CONTENT = (
    "Full Name,Company,Email Address,Phone\n"
    "Ada Lovelace,Analytical Ltd,ada@example.com,555-0100\n"
    ",Ghost Corp,,555-0101\n"
    '"Hopper, Grace",Navy,grace@example.com,\n'
)


@pytest.fixture
def campaign_id(client, owner_headers):
    response = client.post(f"{BASE}/", json={"name": "Import"}, headers=owner_headers)
    return response.json()["id"]


def import_url(campaign_id, action):
    return f"{BASE}/{campaign_id}/import/{action}"


def import_request(batch_size=None, column_mapping=None):
    columns = ["Full Name", "Company", "Email Address"]
    rows = [
        {"Full Name": "Ada", "Company": "Analytical Ltd", "Email Address": "ada@example.com"},
        {"Full Name": "", "Company": "Ghost Corp", "Email Address": ""},
        {"Full Name": "Grace", "Company": "Navy", "Email Address": "grace@example.com"},
        {"Full Name": "Linus", "Company": "", "Email Address": "linus@example.com"},
    ]
    payload = {"columns": columns, "rows": rows}
    if batch_size:
        payload["batch_size"] = batch_size
    if column_mapping:
        payload["column_mapping"] = column_mapping
    return payload


class TestPreview:

    def test_csv_preview(self, client, owner_headers, campaign_id):
        response = client.post(
            import_url(campaign_id, "preview"),
            files={"file": ("leads.csv", CSV_CONTENT.encode("utf-8"), "text/csv")},
            headers=owner_headers,
        )
        body = response.json()

        assert response.status_code == 200
        assert body["file_name"] == "leads.csv"
        assert body["detected_columns"] == ["Full Name", "Company", "Email Address", "Phone"]
        assert body["column_mapping"]["name"] == "Full Name"
        assert body["column_mapping"]["email"] == "Email Address"
        assert body["column_mapping"]["phone"] == "Phone"
        assert body["total_rows"] == 3
        assert body["skipped_rows"] == 1
        assert [r["client_name"] for r in body["preview_rows"]] == ["Ada Lovelace", "Hopper, Grace"]

    def test_unsupported_extension_is_400(self, client, owner_headers, campaign_id):
        response = client.post(
            import_url(campaign_id, "preview"),
            files={"file": ("leads.txt", b"name\nAda\n", "text/plain")},
            headers=owner_headers,
        )

        assert response.status_code == 400

    def test_header_only_file_is_400(self, client, owner_headers, campaign_id):
        response = client.post(
            import_url(campaign_id, "preview"),
            files={"file": ("leads.csv", b"Name,Email\n", "text/csv")},
            headers=owner_headers,
        )

        assert response.status_code == 400

    def test_unknown_campaign_is_404(self, client, owner_headers):
        response = client.post(
            import_url("missing", "preview"),
            files={"file": ("leads.csv", CSV_CONTENT.encode("utf-8"), "text/csv")},
            headers=owner_headers,
        )

        assert response.status_code == 404


class TestExecute:

    def test_execute_with_proposed_mapping(self, client, owner_headers, campaign_id):
        response = client.post(
            import_url(campaign_id, "execute"), json=import_request(batch_size=2), headers=owner_headers
        )
        body = response.json()

        assert response.status_code == 200
        assert body["total"] == 3
        assert body["skipped_count"] == 1
        assert body["created_count"] == 3
        assert body["error_count"] == 0
        assert body["campaign_stats"]["total"] == 3

    def test_user_mapping_replaces_proposal(self, client, owner_headers, campaign_id):
        mapping = {"name": "Company", "email": "Email Address"}

        client.post(
            import_url(campaign_id, "execute"),
            json=import_request(column_mapping=mapping),
            headers=owner_headers,
        )
        leads = client.get(f"{BASE}/{campaign_id}/leads", headers=owner_headers).json()

        assert "Analytical Ltd" in {lead["client_name"] for lead in leads}
        assert all(lead["company_name"] == "" for lead in leads)

    def test_mapping_to_missing_column_is_422(self, client, owner_headers, campaign_id):
        response = client.post(
            import_url(campaign_id, "execute"),
            json=import_request(column_mapping={"name": "Nope"}),
            headers=owner_headers,
        )

        assert response.status_code == 422

    def test_member_cannot_import(self, client, member_headers, campaign_id):
        response = client.post(import_url(campaign_id, "execute"), json=import_request(), headers=member_headers)

        assert response.status_code == 403

    def test_archived_campaign_is_409(self, client, owner_headers, campaign_id):
        client.patch(f"{BASE}/{campaign_id}/status", json={"event": "archive"}, headers=owner_headers)

        response = client.post(import_url(campaign_id, "execute"), json=import_request(), headers=owner_headers)

        assert response.status_code == 409

    def test_no_rows_is_400(self, client, owner_headers, campaign_id):
        response = client.post(
            import_url(campaign_id, "execute"), json={"columns": ["Name"], "rows": []}, headers=owner_headers
        )

        assert response.status_code == 400


class TestStream:

    def test_stream_reports_progress_then_result(self, client, owner_headers, campaign_id):
        response = client.post(
            import_url(campaign_id, "stream"), json=import_request(batch_size=2), headers=owner_headers
        )
        lines = [json.loads(line) for line in response.text.splitlines() if line]

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/x-ndjson")
        assert [line["progress"]["processed"] for line in lines[:-1]] == [2, 3]
        assert lines[-1]["result"]["created_count"] == 3
        assert lines[-1]["result"]["skipped_count"] == 1

    def test_stream_gating_error_is_returned_before_streaming(self, client, owner_headers, campaign_id):
        client.patch(f"{BASE}/{campaign_id}/status", json={"event": "archive"}, headers=owner_headers)

        response = client.post(import_url(campaign_id, "stream"), json=import_request(), headers=owner_headers)

        assert response.status_code == 409
