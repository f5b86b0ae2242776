from decimal import Decimal

import pytest

from fuel_billing.models import Organization, Vehicle


def _order_payload(fleet, sold_date="2025-09-12", **overrides):
    v1, v2, _ = fleet["vehicles"]
    payload = {
        "organization_id": fleet["organization"].id,
        "sold_date": sold_date,
        "order_items": [
            {
                "vehicle_id": v1.id,
                "fuel_id": fleet["petrol"].id,
                "fuel_qty": "10.5",
                "per_ltr_price": "120",
            },
            {
                "vehicle_id": v2.id,
                "fuel_id": fleet["diesel"].id,
                "fuel_qty": "20",
                "per_ltr_price": "100",
                "total_price": "1990",
            },
        ],
    }
    payload.update(overrides)
    return payload


@pytest.fixture()
def created(client, fleet):
    resp = client.post("/api/orders/", json=_order_payload(fleet))
    assert resp.status_code == 201
    return resp.json()


def test_create_orders(client, created):
    assert len(created) == 2
    assert Decimal(created[0]["total_price"]) == Decimal("1260.00")
    assert Decimal(created[1]["total_price"]) == Decimal("1990.00")
    assert created[0]["sold_date"] == "2025-09-12"
    assert int(created[1]["order_no"]) == int(created[0]["order_no"]) + 1

    listing = client.get("/invoices")
    assert "September" in listing.text


def test_create_rejects_vehicle_of_other_organization(client, db_session, fleet):
    other = Organization(ucode="ORG-2", name="Other")
    db_session.add(other)
    db_session.flush()
    stranger = Vehicle(organization_id=other.id, ucode="X-1")
    db_session.add(stranger)
    db_session.commit()

    payload = _order_payload(fleet)
    payload["order_items"][0]["vehicle_id"] = stranger.id
    resp = client.post("/api/orders/", json=payload)

    assert resp.status_code == 422
    assert "X-1" in resp.json()["detail"][0]
    assert client.get("/api/orders/").json()["total"] == 0


def test_create_requires_items(client, fleet):
    resp = client.post("/api/orders/", json=_order_payload(fleet, order_items=[]))
    assert resp.status_code == 422


def test_list_orders_with_stats(client, fleet, created):
    client.post("/api/orders/", json=_order_payload(fleet, sold_date="2025-10-01"))

    resp = client.get("/api/orders/")
    body = resp.json()
    assert resp.status_code == 200
    assert body["total"] == 4
    assert body["stats"]["total_vehicles"] == 2
    assert Decimal(body["stats"]["total_quantity"]) == Decimal("61.00")
    assert Decimal(body["stats"]["total_sales"]) == Decimal("6500.00")
    assert [item["id"] for item in body["items"]] == [4, 3, 2, 1]

    resp = client.get(
        "/api/orders/",
        params={"start_date": "2025-10-01", "vehicle_id": fleet["vehicles"][0].id},
    )
    body = resp.json()
    assert body["total"] == 1
    assert body["items"][0]["sold_date"] == "2025-10-01"

    resp = client.get("/api/orders/", params={"search": "V-2", "sort": "sold_date"})
    assert [item["sold_date"] for item in resp.json()["items"]] == [
        "2025-09-12",
        "2025-10-01",
    ]


def test_list_orders_rejects_unknown_sort(client, created):
    resp = client.get("/api/orders/", params={"sort": "password"})
    assert resp.status_code == 422


def test_update_order_recomputes_total(client, created):
    order_id = created[0]["id"]
    resp = client.patch(f"/api/orders/{order_id}", json={"fuel_qty": "5"})

    assert resp.status_code == 200
    assert Decimal(resp.json()["total_price"]) == Decimal("600.00")


def test_update_missing_order(client, fleet):
    resp = client.patch("/api/orders/999", json={"fuel_qty": "5"})
    assert resp.status_code == 404


def test_delete_order(client, created):
    order_id = created[0]["id"]

    resp = client.delete(f"/api/orders/{order_id}")
    assert resp.status_code == 204
    assert client.get(f"/api/orders/{order_id}").status_code == 404
    assert client.get("/api/orders/").json()["total"] == 1


@pytest.mark.parametrize("field", ["fuel_qty", "per_ltr_price", "sold_date", "vehicle_id"])
def test_update_rejects_null_fields(client, created, field):
    order_id = created[0]["id"]

    resp = client.patch(f"/api/orders/{order_id}", json={field: None})

    assert resp.status_code == 422
    assert resp.json()["detail"] == [f"{field} cannot be null."]
    unchanged = client.get(f"/api/orders/{order_id}").json()
    assert unchanged[field] == created[0][field]
