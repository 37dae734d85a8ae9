"""HTTP tests for spreadsheet import, export and PDF reports."""

import os

from app.config import get_settings

CLIENTS_CSV = b"FirstName,LastName,Email\nAna,Gomez,ana@example.com\n,Perez,bad-email\n"


class TestImports:

    def test_upload_csv(self, api, admin_headers):
        response = api.post(
            "/v1/imports",
            params={"kind": "clients"},
            files={"file": ("clients.csv", CLIENTS_CSV, "text/csv")},
            headers=admin_headers,
        )

        assert response.status_code == 200
        body = response.json()
        assert (body["total_rows"], body["inserted"], body["errors"]) == (2, 1, 1)
        assert body["success"] is False
        assert {e["field"] for e in body["error_list"]} == {"FirstName", "Email"}
        assert len(os.listdir(get_settings().UPLOAD_DIR)) == 1

    def test_history(self, api, admin_headers):
        api.post("/v1/imports", files={"file": ("clients.csv", CLIENTS_CSV, "text/csv")}, headers=admin_headers)
        jobs = api.get("/v1/imports", headers=admin_headers).json()
        assert len(jobs) == 1
        assert jobs[0]["status"] == "completed"
        assert jobs[0]["uploaded_by"] == "admin@test.com"

    def test_bad_extension(self, api, admin_headers):
        response = api.post(
            "/v1/imports", files={"file": ("notes.txt", b"hello", "text/plain")}, headers=admin_headers
        )
        assert response.status_code == 400

    def test_unreadable_workbook(self, api, admin_headers):
        response = api.post(
            "/v1/imports", files={"file": ("data.xlsx", b"garbage", "application/octet-stream")}, headers=admin_headers
        )
        assert response.status_code == 400

    def test_admin_only(self, api, user_headers):
        response = api.post("/v1/imports", files={"file": ("c.csv", CLIENTS_CSV, "text/csv")}, headers=user_headers)
        assert response.status_code == 403


class TestDownloads:

    def test_exports(self, api, admin_headers, make_client):
        make_client()
        for name in ("clients", "products", "sales"):
            response = api.get(f"/v1/exports/{name}", headers=admin_headers)
            assert response.status_code == 200
            assert "attachment" in response.headers["content-disposition"]
            assert response.content[:2] == b"PK"

    def test_reports(self, api, admin_headers, make_product):
        make_product()
        for name in ("products", "clients", "sales"):
            response = api.get(f"/v1/reports/{name}", headers=admin_headers)
            assert response.status_code == 200
            assert response.headers["content-type"] == "application/pdf"
            assert response.content.startswith(b"%PDF")

    def test_reports_admin_only(self, api, user_headers):
        assert api.get("/v1/reports/sales", headers=user_headers).status_code == 403
