"""
Tests for transaction API endpoints.

These test the HTTP layer. Business logic is tested in
test_transaction_service.py.
"""

from decimal import Decimal


def as_(principal_name):
    return {"X-Principal": principal_name}


def open_account(client):
    customer_id = client.post(
        "/customers", headers=as_("teller1"), json={"name": "Erin"}
    ).json()["id"]
    return client.post(
        "/accounts", headers=as_("manager1"), json={"customer_id": customer_id}
    ).json()["id"]


def post_transaction(client, account_id, amount, transaction_type="DEPOSIT",
                     principal="teller1"):
    return client.post("/transactions", headers=as_(principal), json={
        "account_id": account_id,
        "amount": amount,
        "transaction_type": transaction_type,
        "description": "Counter",
    })


def balance(client, account_id):
    data = client.get(f"/accounts/{account_id}", headers=as_("auditor1")).json()
    return Decimal(data["balance"])


class TestCreateTransaction:

    def test_deposit_returns_201(self, client):
        account_id = open_account(client)

        response = post_transaction(client, account_id, "500.00")
        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "APPROVED"
        assert data["approved_by"] is None
        assert balance(client, account_id) == Decimal("500.00")

    def test_large_amount_is_pending(self, client):
        account_id = open_account(client)

        response = post_transaction(client, account_id, "20000.00")
        assert response.status_code == 201
        assert response.json()["status"] == "PENDING_APPROVAL"
        assert balance(client, account_id) == Decimal("0")

    def test_insufficient_funds_returns_400(self, client):
        account_id = open_account(client)

        response = post_transaction(client, account_id, "10.00", "WITHDRAWAL")
        assert response.status_code == 400
        detail = response.json()["detail"]
        assert detail["code"] == "INSUFFICIENT_FUNDS"
        assert detail["retryable"] is False

    def test_zero_amount_returns_400(self, client):
        account_id = open_account(client)

        response = post_transaction(client, account_id, "0")
        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "VALIDATION_ERROR"

    def test_missing_account_returns_404(self, client):
        response = post_transaction(client, 999, "10.00")
        assert response.status_code == 404

    def test_auditor_returns_403(self, client):
        account_id = open_account(client)

        response = post_transaction(client, account_id, "10.00", principal="auditor1")
        assert response.status_code == 403


class TestApproveTransaction:

    def test_manager_approves(self, client):
        account_id = open_account(client)
        txn_id = post_transaction(client, account_id, "20000.00").json()["id"]

        response = client.post(
            f"/transactions/{txn_id}/approve", headers=as_("manager1")
        )
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "APPROVED"
        assert data["approved_by"] == "manager1"
        assert balance(client, account_id) == Decimal("20000.00")

    def test_teller_returns_403(self, client):
        account_id = open_account(client)
        txn_id = post_transaction(client, account_id, "20000.00").json()["id"]

        response = client.post(
            f"/transactions/{txn_id}/approve", headers=as_("teller1")
        )
        assert response.status_code == 403

    def test_second_approval_returns_409(self, client):
        account_id = open_account(client)
        txn_id = post_transaction(client, account_id, "20000.00").json()["id"]
        client.post(f"/transactions/{txn_id}/approve", headers=as_("manager1"))

        response = client.post(
            f"/transactions/{txn_id}/approve", headers=as_("manager1")
        )
        assert response.status_code == 409
        assert response.json()["detail"]["code"] == "NOT_FOUND_OR_INVALID_STATE"

    def test_missing_transaction_returns_409(self, client):
        response = client.post("/transactions/999/approve", headers=as_("manager1"))
        assert response.status_code == 409

    def test_unaffordable_approval_returns_400(self, client):
        account_id = open_account(client)
        post_transaction(client, account_id, "500.00")
        txn_id = post_transaction(
            client, account_id, "15000.00", "WITHDRAWAL"
        ).json()["id"]

        response = client.post(
            f"/transactions/{txn_id}/approve", headers=as_("manager1")
        )
        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "INSUFFICIENT_FUNDS"
        assert balance(client, account_id) == Decimal("500.00")


class TestGetTransaction:

    def test_details_include_customer(self, client):
        account_id = open_account(client)
        txn_id = post_transaction(client, account_id, "42.00").json()["id"]

        response = client.get(f"/transactions/{txn_id}", headers=as_("auditor1"))
        assert response.status_code == 200
        data = response.json()
        assert data["transaction_id"] == txn_id
        assert data["account_id"] == account_id
        assert data["customer_name"] == "Erin"
        assert Decimal(data["amount"]) == Decimal("42.00")

    def test_missing_returns_404(self, client):
        response = client.get("/transactions/999", headers=as_("auditor1"))
        assert response.status_code == 404
