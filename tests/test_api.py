"""
Tests for the HTTP routes.
"""
import io
from pathlib import Path

import pandas as pd
import pytest
from fastapi.testclient import TestClient

from app.api import app, get_transaction_service
from conftest import StubOracle
from core.config import get_settings
from services.transaction_service import TransactionService

STATEMENT_CSV = (
    "Date,Narration,Chq,Withdrawal,Deposit,Balance\n"
    "01/01/2023,UPI-AMAZON-PAY,,0,500,10500\n"
    '02/01/2023,SALARY CREDIT,,0,"50,000",60500\n'
    "bad,row\n"
)


@pytest.fixture
def client(db):
    service = TransactionService(oracle=StubOracle(reply="Shopping"), db=db)
    app.dependency_overrides[get_transaction_service] = lambda: service
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def upload(client, content=STATEMENT_CSV, filename="statement.csv", user="user-1"):
    return client.post(
        "/api/transactions/upload",
        files={"file": (filename, io.BytesIO(content.encode("utf-8") if isinstance(content, str) else content))},
        headers={"X-User-Id": user},
    )


def test_health_check(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_upload_csv_reports_saved_count(client):
    response = upload(client)

    assert response.status_code == 200
    assert response.json() == {"message": "Upload successful", "saved": 2}

    listed = client.get("/api/transactions", headers={"X-User-Id": "user-1"}).json()
    assert [(t["description"], t["type"]) for t in listed] == [
        ("SALARY CREDIT", "credit"),
        ("UPI-AMAZON-PAY", "debit"),
    ]


def test_upload_xlsx(client):
    buffer = io.BytesIO()
    pd.DataFrame([
        ["Date", "Narration", "Chq", "Withdrawal", "Deposit", "Balance"],
        [44927, "FASTAG RECHARGE", None, "₹1,200.50", 0, 100],
    ]).to_excel(buffer, header=False, index=False, engine="openpyxl")

    response = upload(client, content=buffer.getvalue(), filename="statement.xlsx")

    assert response.status_code == 200
    assert response.json()["saved"] == 1
    (txn,) = client.get("/api/transactions", headers={"X-User-Id": "user-1"}).json()
    assert txn["amount"] == 1200.50
    assert txn["date"] == "2023-01-01"


def test_upload_removes_temporary_file(client):
    upload(client)
    assert list(Path(get_settings().temp_storage_path).glob("*statement.csv")) == []


def test_upload_requires_identity(client):
    response = client.post(
        "/api/transactions/upload",
        files={"file": ("statement.csv", io.BytesIO(STATEMENT_CSV.encode("utf-8")))},
    )
    assert response.status_code == 401


def test_upload_without_file(client):
    response = client.post("/api/transactions/upload", headers={"X-User-Id": "user-1"})
    assert response.status_code == 400
    assert response.json()["detail"] == "No file uploaded"


def test_upload_rejects_unsupported_extension(client):
    response = upload(client, filename="statement.pdf")
    assert response.status_code == 400


def test_upload_unreadable_workbook_is_server_error(client):
    response = upload(client, content=b"definitely not a workbook", filename="statement.xlsx")
    assert response.status_code == 500


def test_summary_and_date_filter(client):
    upload(client)

    summary = client.get("/api/transactions/summary", headers={"X-User-Id": "user-1"}).json()
    assert summary == [{"category": "Shopping", "total": 50500.0, "count": 2}]

    filtered = client.get(
        "/api/transactions",
        params={"startDate": "2023-01-02", "endDate": "2023-02-28"},
        headers={"X-User-Id": "user-1"},
    ).json()
    assert [t["description"] for t in filtered] == ["SALARY CREDIT"]


def test_delete_all(client):
    upload(client)

    response = client.delete("/api/transactions/all", headers={"X-User-Id": "user-1"})

    assert response.status_code == 200
    assert response.json() == {"message": "All transactions deleted", "deleted": 2}
    assert client.get("/api/transactions", headers={"X-User-Id": "user-1"}).json() == []


def test_users_do_not_see_each_other(client):
    upload(client, user="alice")
    assert client.get("/api/transactions", headers={"X-User-Id": "bob"}).json() == []
