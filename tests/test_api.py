from __future__ import annotations

from datetime import datetime, timezone

from conftest import FRANKFURTER_HOST, native_payload


def test_rates_endpoint_reports_provenance(client, upstream) -> None:
    upstream.json(FRANKFURTER_HOST, native_payload(base="EUR", rates={"USD": 1.08, "EUR": 3}))

    resp = client.get("/rates", params={"base": "eur"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["base"] == "EUR"
    assert body["source"] == "frankfurter"
    assert body["rates"]["EUR"] == 1.0
    assert body["needs_api_key"] is True


def test_rates_endpoint_falls_back_when_upstream_down(client) -> None:
    resp = client.get("/rates")

    body = resp.json()
    assert resp.status_code == 200
    assert body["source"] == "fallback"
    assert body["base"] == "USD"
    assert body["rates"]["EUR"] == 0.92


def test_rate_board_quotes(client_factory) -> None:
    client = client_factory(board_currencies=["EUR", "GBP", "XXX"], quote_spread=0.05)

    body = client.get("/rates/board").json()

    assert body["using_fallback"] is True
    assert [q["code"] for q in body["quotes"]] == ["EUR", "GBP"]
    eur = body["quotes"][0]
    assert eur["buy"] == "0.8740"
    assert eur["sell"] == "0.9660"


def test_convert_uses_from_anchored_table(client, upstream) -> None:
    upstream.json(FRANKFURTER_HOST, native_payload(base="GBP", rates={"USD": 1.25}))

    body = client.get("/rates/convert", params={"amount": 200, "from": "GBP", "to": "USD"}).json()

    assert body["converted"] == 250.0
    assert body["rate"] == 1.25
    assert body["from_currency"] == "GBP"
    assert upstream.calls[0].url.params["from"] == "GBP"


def test_dashboard_endpoint(client, store, upstream) -> None:
    today = datetime.now(timezone.utc).date().isoformat()
    upstream.json(FRANKFURTER_HOST, native_payload(rates={"EUR": 0.5}))
    store.insert("inventory", {"code": "EUR", "name": "Euro", "amount": 80.0, "threshold": 0.0})
    store.insert(
        "transactions",
        {"id": "T1", "date": today, "customer": "Ada", "amount": 10, "converted": 12},
    )

    body = client.get("/dashboard").json()

    assert body == {
        "success": True,
        "total_revenue": 12.0,
        "transactions_today": 1,
        "active_customers": 1,
        "cash_on_hand": 160.0,
    }


def test_inventory_crud_and_low_stock(client) -> None:
    created = client.post("/inventory", json={"code": "kes", "amount": 500, "threshold": 1000})
    assert created.status_code == 201
    item = created.json()["item"]
    assert item["code"] == "KES"
    assert item["name"] == "Kenyan Shilling"
    assert item["low_stock"] is True
    assert item["percent_of_threshold"] == 50.0

    low = client.get("/inventory/low-stock").json()["items"]
    assert [i["code"] for i in low] == ["KES"]

    updated = client.put("/inventory/KES", json={"amount": 1500}).json()["item"]
    assert updated["low_stock"] is False

    assert client.get("/inventory/low-stock").json()["items"] == []
    assert client.delete("/inventory/kes").json()["item"]["code"] == "KES"
    assert client.get("/inventory").json()["items"] == []


def test_inventory_row_with_unreadable_amount_still_lists(client, store) -> None:
    store.insert("inventory", {"code": "CHF", "name": "Swiss Franc", "amount": "n/a", "threshold": 100.0})

    resp = client.get("/inventory")

    assert resp.status_code == 200
    (chf,) = resp.json()["items"]
    assert chf["amount"] == 0.0
    assert chf["low_stock"] is True
    assert chf["percent_of_threshold"] == 0.0


def test_inventory_duplicate_is_store_error(client) -> None:
    client.post("/inventory", json={"code": "EUR", "amount": 1})

    resp = client.post("/inventory", json={"code": "EUR", "amount": 2})

    assert resp.status_code == 500
    assert resp.json()["error"] == "store_error"


def test_missing_record_is_404(client) -> None:
    resp = client.delete("/transactions/NOPE")

    assert resp.status_code == 404
    assert resp.json()["success"] is False


def test_record_transaction_generates_id(client) -> None:
    resp = client.post(
        "/transactions",
        json={
            "date": "2025-03-10",
            "customer": "Ada",
            "from_currency": "usd",
            "to_currency": "EUR",
            "amount": 100,
            "converted": 92,
            "rate": 0.92,
        },
    )

    assert resp.status_code == 201
    item = resp.json()["item"]
    assert item["id"].startswith("TXN")
    assert item["from_currency"] == "USD"
    assert item["status"] == "completed"

    cancelled = client.put(f"/transactions/{item['id']}", json={"status": "cancelled"})
    assert cancelled.json()["item"]["status"] == "cancelled"

    listed = client.get("/transactions", params={"status": "cancelled"}).json()["items"]
    assert [t["id"] for t in listed] == [item["id"]]


def test_transaction_validation(client) -> None:
    resp = client.post(
        "/transactions",
        json={"date": "2025-03-10", "customer": "Ada", "from_currency": "USD",
              "to_currency": "EUR", "amount": -1, "rate": 0.9, "status": "lost"},
    )

    assert resp.status_code == 422
    assert resp.json()["error"] == "validation_error"


def test_auth_status(client_factory) -> None:
    client = client_factory(auth_tokens=["s3cret-token"])

    assert client.get("/auth/status").json() == {"authenticated": False, "user": None}
    wrong = client.get("/auth/status", headers={"Authorization": "Bearer nope"}).json()
    assert wrong["authenticated"] is False
    ok = client.get("/auth/status", headers={"Authorization": "Bearer s3cret-token"}).json()
    assert ok["authenticated"] is True
    assert ok["user"]["id"]


def test_writes_require_user_when_enabled(client_factory) -> None:
    client = client_factory(auth_required=True, auth_tokens=["s3cret-token"])

    denied = client.post("/inventory", json={"code": "EUR", "amount": 1})
    assert denied.status_code == 401

    allowed = client.post(
        "/inventory",
        json={"code": "EUR", "amount": 1},
        headers={"Authorization": "Bearer s3cret-token"},
    )
    assert allowed.status_code == 201
    # reads stay open
    assert client.get("/inventory").status_code == 200


def test_currency_catalog(client) -> None:
    africa = client.get("/currencies", params={"region": "Africa"}).json()

    assert {"code": "NGN", "name": "Nigerian Naira", "region": "Africa"} in africa
    assert all(c["region"] == "Africa" for c in africa)
    assert len(client.get("/currencies").json()) == 40


def test_unknown_route_is_json_404(client) -> None:
    resp = client.get("/nowhere")

    assert resp.status_code == 404
    assert resp.json()["error"] == "not_found"
