"""
Tests for posting and reconciliation endpoints.

These run against the local ledger backend with the test
database. Each status code maps to one follow-up the caller
must take.
"""

import pytest


def posting_body(bank="1920:10001", amount=45050, entry_date="2024-03-15", **extra):
    body = {
        "posting": {
            "entry_date": entry_date,
            "description": "Office supplies",
            "lines": [
                {"amount": {"amount": amount, "currency": "NOK"}, "entry_type": "DEBIT", "account": "6540"},
                {"amount": {"amount": amount, "currency": "NOK"}, "entry_type": "CREDIT", "account": bank},
            ],
        },
    }
    body.update(extra)
    return body


@pytest.fixture
def chart(client):
    for code, name in [("6540", "Inventory"), ("1920:10001", "Operating account")]:
        client.post("/ledger/accounts", json={"code": code, "name": name})


class TestValidate:

    def test_balanced_posting(self, client):
        response = client.post("/postings/validate", json=posting_body()["posting"])
        assert response.status_code == 200
        assert response.json() == {"kind": "ok"}

    def test_unbalanced_posting(self, client):
        body = posting_body()["posting"]
        body["lines"][1]["amount"]["amount"] = 40000
        data = client.post("/postings/validate", json=body).json()

        assert data["kind"] == "balance_error"
        assert data["difference"] == 5050

    def test_bare_bank_root(self, client):
        data = client.post("/postings/validate", json=posting_body(bank="1920")["posting"]).json()
        assert data["kind"] == "malformed_account"
        assert data["reason"] == "missing_subledger"
        assert data["line_index"] == 1

    def test_float_amount_is_refused(self, client):
        body = posting_body()["posting"]
        body["lines"][0]["amount"]["amount"] = 450.5
        assert client.post("/postings/validate", json=body).status_code == 422


class TestSubmit:

    def test_accepted_posting_returns_201(self, client, chart):
        response = client.post("/postings", json=posting_body())
        assert response.status_code == 201
        data = response.json()
        assert data["kind"] == "accepted"
        assert data["posting_id"]

        balance = client.get("/ledger/accounts/6540/balance").json()
        assert balance["balance"] == 45050

    def test_unassigned_bank_line_is_filled_in(self, client, chart):
        response = client.post("/postings", json=posting_body(bank=None))
        assert response.status_code == 201
        assert response.json()["account"] == "1920:10001"

    def test_invalid_posting_returns_400(self, client, chart):
        response = client.post("/postings", json=posting_body(bank="1920"))
        assert response.status_code == 400
        data = response.json()
        assert data["reason"] == "invalid_posting"
        assert data["error"]["kind"] == "malformed_account"

    def test_duplicate_returns_409(self, client, chart):
        client.post("/postings", json=posting_body())
        response = client.post("/postings", json=posting_body(entry_date="2024-03-17"))

        assert response.status_code == 409
        data = response.json()
        assert data["reason"] == "likely_duplicate"
        assert data["duplicate"]["day_delta"] == 2

    def test_two_bank_accounts_return_409(self, client, chart):
        client.post("/ledger/accounts", json={"code": "1920:10002", "name": "Savings"})
        response = client.post("/postings", json=posting_body(bank=None))

        assert response.status_code == 409
        data = response.json()
        assert data["kind"] == "needs_disambiguation"
        assert [o["code"] for o in data["options"]] == ["1920:10001", "1920:10002"]

    def test_explicit_account_is_used(self, client, chart):
        client.post("/ledger/accounts", json={"code": "1920:10002", "name": "Savings"})
        response = client.post("/postings", json=posting_body(bank=None, explicit_account="1920:10002"))

        assert response.status_code == 201
        assert response.json()["account"] == "1920:10002"

    def test_no_bank_account_returns_422(self, client):
        client.post("/ledger/accounts", json={"code": "6540", "name": "Inventory"})
        response = client.post("/postings", json=posting_body(bank=None))

        assert response.status_code == 422
        assert response.json()["reason"] == "no_account_available"

    def test_ledger_rejection_returns_400(self, client, chart):
        response = client.post("/postings", json=posting_body(bank="1920:99999"))
        assert response.status_code == 400
        assert response.json()["reason"] == "ledger_rejected"


class TestReconciliationEndpoints:

    def test_find_matches(self, client, chart):
        client.post("/postings", json=posting_body())
        response = client.post("/reconciliation/matches", json={
            "amount": {"amount": 45000, "currency": "NOK"},
            "entry_date": "2024-03-16",
        })

        assert response.status_code == 200
        data = response.json()
        assert data["match_count"] == 1
        assert data["matches"][0]["amount_delta"] == 50

    def test_statement_reconciliation(self, client, chart):
        client.post("/postings", json=posting_body())
        response = client.post("/reconciliation/statement", json={
            "period_from": "2024-03-01",
            "period_to": "2024-03-31",
            "account_code": "1920:10001",
            "lines": [
                {"amount": {"amount": -45050, "currency": "NOK"}, "entry_date": "2024-03-15", "description": "Clas Ohlson"},
                {"amount": {"amount": -9900, "currency": "NOK"}, "entry_date": "2024-03-20", "description": "Spotify"},
            ],
        })

        assert response.status_code == 200
        data = response.json()
        assert len(data["matched"]) == 1
        assert data["matched"][0]["statement_index"] == 0
        assert [u["statement_index"] for u in data["unmatched"]] == [1]

    def test_inverted_period_returns_400(self, client):
        response = client.post("/reconciliation/statement", json={
            "period_from": "2024-03-31",
            "period_to": "2024-03-01",
            "lines": [{"amount": {"amount": 100, "currency": "NOK"}, "entry_date": "2024-03-15"}],
        })
        assert response.status_code == 400
