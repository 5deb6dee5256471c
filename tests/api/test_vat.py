"""
Tests for VAT endpoints.
"""


def convert(client, amount, code, includes_vat, **extra):
    body = {
        "amount": {"amount": amount, "currency": "NOK"},
        "vat_code": code,
        "amount_includes_vat": includes_vat,
    }
    body.update(extra)
    return client.post("/vat/convert", json=body)


def test_lists_rates(client):
    codes = [r["code"] for r in client.get("/vat/rates").json()]
    assert "HIGH" in codes
    assert "RAW_FISH" in codes


def test_split_receipt_total(client):
    data = convert(client, 50000, "HIGH", True).json()
    assert data["net"]["amount"] == 40000
    assert data["vat"]["amount"] == 10000
    assert data["gross"]["amount"] == 50000


def test_add_vat_to_net(client):
    data = convert(client, 10000, "MEDIUM", False).json()
    assert data["vat"]["amount"] == 1500
    assert data["gross"]["amount"] == 11500


def test_includes_vat_is_required(client):
    response = client.post("/vat/convert", json={
        "amount": {"amount": 50000, "currency": "NOK"},
        "vat_code": "HIGH",
    })
    assert response.status_code == 422


def test_unknown_code_returns_400(client):
    assert convert(client, 100, "STANDARD", True).status_code == 400


def test_wrong_direction_returns_400(client):
    response = convert(client, 100, "HIGH_DIRECT", True, direction="SALE")
    assert response.status_code == 400


def test_negative_amount_returns_400(client):
    response = convert(client, -100, "HIGH", False)
    assert response.status_code == 400
    assert "non-negative" in response.json()["detail"]
