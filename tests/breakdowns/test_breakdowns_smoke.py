"""Smoke tests for the breakdowns blueprint (SQLite-backed)."""

from extensions import db
from modules.breakdowns.models import Breakdown
from modules.inventory.models import SparePart


def _part(client, part_number="SP-001", quantity=10):
    response = client.post(
        "/inventory/api/parts",
        json={"partNumber": part_number, "description": "Proximity sensor", "quantity": quantity, "location": "Rack A1"},
    )
    assert response.status_code == 201
    return response.get_json()["id"]


def _quantity(app, part_id):
    with app.app_context():
        return db.session.get(SparePart, part_id).quantity


def _form(**overrides):
    data = {
        "loss_time": "30",
        "line": "Line A",
        "machine": "BM-01",
        "description": "Drive belt snapped",
        "category": "Mechanical",
    }
    data.update(overrides)
    return data


def test_breakdown_pages_available(client):
    assert client.get("/breakdowns/").status_code == 200
    assert client.get("/breakdowns/create").status_code == 200
    assert client.get("/breakdowns/missing").status_code == 404


def test_create_breakdown_form_flow(client, app):
    part_id = _part(client)

    response = client.post(
        "/breakdowns/create",
        data=_form(spare_part_id=[part_id, ""], quantity_consumed=["3", ""]),
        follow_redirects=False,
    )

    assert response.status_code == 302
    assert "/breakdowns/" in response.headers["Location"]
    assert _quantity(app, part_id) == 7

    with app.app_context():
        breakdown = db.session.execute(db.select(Breakdown)).scalar_one()
        assert breakdown.spares_consumed[0]["partNumber"] == "SP-001"
        assert breakdown.spares_consumed[0]["quantityConsumed"] == 3
        breakdown_id = breakdown.id

    detail = client.get(f"/breakdowns/{breakdown_id}").get_data(as_text=True)
    assert "SP-001" in detail


def test_create_breakdown_form_insufficient_stock(client, app):
    part_id = _part(client, quantity=2)

    response = client.post(
        "/breakdowns/create",
        data=_form(spare_part_id=[part_id], quantity_consumed=["5"]),
    )

    assert response.status_code == 409
    assert "Not enough stock for spare part SP-001" in response.get_data(as_text=True)
    assert _quantity(app, part_id) == 2
    with app.app_context():
        assert db.session.execute(db.select(Breakdown)).first() is None


def test_create_breakdown_form_validation(client):
    response = client.post("/breakdowns/create", data=_form(category="Hydraulic", machine=""))

    assert response.status_code == 400
    html = response.get_data(as_text=True)
    assert "Invalid category selected." in html
    assert "Machine is required" in html


def test_delete_breakdown_form_restores_stock(client, app):
    part_id = _part(client)
    created = client.post(
        "/breakdowns/api",
        json={
            "lossTime": 15, "line": "Line A", "machine": "BM-02", "description": "Sensor fault",
            "category": "Instrumentation", "sparesConsumed": [{"sparePartId": part_id, "quantityConsumed": 3}],
        },
    )
    breakdown_id = created.get_json()["breakdown"]["id"]
    assert _quantity(app, part_id) == 7

    response = client.post(f"/breakdowns/{breakdown_id}/delete")

    assert response.status_code == 302
    assert response.headers["Location"].endswith("/breakdowns/")
    assert _quantity(app, part_id) == 10


def test_json_api_end_to_end(client, app):
    part_id = _part(client, "SP-001", 10)
    payload = {
        "lossTime": 20, "line": "Line A", "machine": "BM-01", "description": "Contactor burnt",
        "category": "Electrical", "sparesConsumed": [{"sparePartId": part_id, "quantityConsumed": 3}],
    }

    created = client.post("/breakdowns/api", json=payload)
    assert created.status_code == 201
    record = created.get_json()["breakdown"]
    assert set(record) == {
        "id", "lossTime", "line", "machine", "description", "category",
        "sparesConsumed", "createdAt", "updatedAt",
    }
    assert record["sparesConsumed"] == [{
        "sparePartId": part_id, "partNumber": "SP-001",
        "description": "Proximity sensor", "quantityConsumed": 3,
    }]
    assert _quantity(app, part_id) == 7

    # editing the part leaves the snapshot alone
    client.patch(f"/inventory/api/parts/{part_id}", json={"partNumber": "SP-001-NEW"})
    fetched = client.get(f"/breakdowns/api/{record['id']}").get_json()
    assert fetched["sparesConsumed"][0]["partNumber"] == "SP-001"

    assert [b["id"] for b in client.get("/breakdowns/api").get_json()] == [record["id"]]

    deleted = client.delete(f"/breakdowns/api/{record['id']}")
    assert deleted.status_code == 200
    assert deleted.get_json() == {"success": True, "message": "Breakdown deleted successfully."}
    assert _quantity(app, part_id) == 10

    again = client.delete(f"/breakdowns/api/{record['id']}")
    assert again.status_code == 404
    assert again.get_json()["success"] is False
    assert _quantity(app, part_id) == 10


def test_json_api_error_statuses(client, app):
    part_id = _part(client, quantity=1)
    base = {"lossTime": 5, "line": "L1", "machine": "M1", "description": "d", "category": "Other"}

    invalid = client.post("/breakdowns/api", json=dict(base, lossTime=-1))
    assert invalid.status_code == 400
    assert "loss_time" in invalid.get_json()["errors"]

    short = client.post(
        "/breakdowns/api",
        json=dict(base, sparesConsumed=[{"sparePartId": part_id, "quantityConsumed": 2}]),
    )
    assert short.status_code == 409

    missing = client.post(
        "/breakdowns/api",
        json=dict(base, sparesConsumed=[{"sparePartId": "nope", "quantityConsumed": 1}]),
    )
    assert missing.status_code == 409
    assert "nope" in missing.get_json()["errors"]["spares_consumed"][0]
    assert _quantity(app, part_id) == 1


def test_deleting_part_keeps_breakdown_snapshot(client, app):
    part_id = _part(client)
    created = client.post(
        "/breakdowns/api",
        json={
            "lossTime": 5, "line": "L1", "machine": "M1", "description": "d", "category": "Other",
            "sparesConsumed": [{"sparePartId": part_id, "quantityConsumed": 1}],
        },
    ).get_json()["breakdown"]

    assert client.delete(f"/inventory/api/parts/{part_id}").status_code == 200
    fetched = client.get(f"/breakdowns/api/{created['id']}").get_json()
    assert fetched["sparesConsumed"][0]["partNumber"] == "SP-001"

    # part is gone: deletion still succeeds, nothing to restock
    assert client.delete(f"/breakdowns/api/{created['id']}").status_code == 200


def test_json_api_rejects_non_object_body(client):
    for body in ([{"lossTime": 5}], "breakdown"):
        response = client.post("/breakdowns/api", json=body)
        assert response.status_code == 400
        assert response.get_json()["errors"] == {"body": ["Expected a JSON object."]}


def test_json_api_rejects_values_beyond_integer_column(client, app):
    part_id = _part(client)
    base = {"line": "L1", "machine": "M1", "description": "d", "category": "Other"}

    huge_loss = client.post("/breakdowns/api", json=dict(base, lossTime=10**19))
    assert huge_loss.status_code == 400
    assert huge_loss.get_json()["errors"]["loss_time"] == ["Loss time is too large"]

    huge_qty = client.post(
        "/breakdowns/api",
        json=dict(base, lossTime=5, sparesConsumed=[{"sparePartId": part_id, "quantityConsumed": 10**19}]),
    )
    assert huge_qty.status_code == 400
    assert "spares_consumed" in huge_qty.get_json()["errors"]
    assert _quantity(app, part_id) == 10


def test_restock_past_integer_column_keeps_breakdown_and_stock(client, app):
    part_id = _part(client)
    created = client.post(
        "/breakdowns/api",
        json={
            "lossTime": 5, "line": "L1", "machine": "M1", "description": "d", "category": "Other",
            "sparesConsumed": [{"sparePartId": part_id, "quantityConsumed": 1}],
        },
    ).get_json()["breakdown"]
    full = 2**63 - 1
    assert client.patch(f"/inventory/api/parts/{part_id}", json={"quantity": full}).status_code == 200

    response = client.delete(f"/breakdowns/api/{created['id']}")

    assert response.status_code == 500
    assert response.get_json()["success"] is False
    assert _quantity(app, part_id) == full
    assert client.get(f"/breakdowns/api/{created['id']}").status_code == 200


def test_create_form_rejects_half_filled_spare_row(client, app):
    first = _part(client, "SP-001")
    second = _part(client, "SP-002")

    response = client.post(
        "/breakdowns/create",
        data=_form(spare_part_id=[first, second], quantity_consumed=["3"]),
    )

    assert response.status_code == 400
    assert "Each consumed spare needs a part and a positive quantity." in response.get_data(as_text=True)
    assert (_quantity(app, first), _quantity(app, second)) == (10, 10)
    with app.app_context():
        assert db.session.execute(db.select(Breakdown)).first() is None
