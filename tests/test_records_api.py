"""Record endpoints and order-level conservation."""


def test_record_rejected_when_order_is_full(client, create_order, create_record):
    order = create_order(quantity=100)
    create_record(order["id"], 60)
    r = client.post(
        f"/api/v1/orders/{order['id']}/records",
        json={"quantity": 50, "washType": "N/W", "processTypes": ["V"]},
    )
    assert r.status_code == 409
    assert r.json()["message"] == "Quantity cannot exceed remaining order quantity (40)"
    records = client.get(f"/api/v1/orders/{order['id']}/records").json()["data"]
    assert [rec["quantity"] for rec in records] == [60]


def test_record_update_excludes_its_own_quantity(client, create_order, create_record):
    order = create_order(quantity=100)
    record = create_record(order["id"], 60)
    r = client.put(f"/api/v1/orders/{order['id']}/records/{record['id']}", json={"quantity": 100})
    assert r.status_code == 200
    assert r.json()["data"]["quantity"] == 100

    r = client.put(f"/api/v1/orders/{order['id']}/records/{record['id']}", json={"quantity": 101})
    assert r.status_code == 409


def test_record_quantity_cannot_drop_below_assigned(client, create_order, create_record, create_assignment):
    order = create_order(quantity=100)
    record = create_record(order["id"], 60)
    create_assignment(record["id"], 40)
    r = client.put(f"/api/v1/orders/{order['id']}/records/{record['id']}", json={"quantity": 30})
    assert r.status_code == 409
    assert "40" in r.json()["message"]


def test_record_validation(client, create_order):
    order = create_order()
    r = client.post(
        f"/api/v1/orders/{order['id']}/records",
        json={"quantity": 10, "washType": "Bleach", "processTypes": []},
    )
    assert r.status_code == 400
    errors = r.json()["errors"]
    assert "washType" in errors
    assert "processTypes" in errors


def test_process_types_are_deduplicated(client, create_order, create_record):
    order = create_order()
    record = create_record(order["id"], 10, wash_type="Acid/W", process_types=("V", "Rib", "V"))
    assert record["processTypes"] == ["V", "Rib"]
    assert record["washType"] == "Acid/W"


def test_record_must_belong_to_order(client, create_order, create_record):
    first = create_order()
    second = create_order()
    record = create_record(first["id"], 10)
    r = client.put(f"/api/v1/orders/{second['id']}/records/{record['id']}", json={"quantity": 5})
    assert r.status_code == 400
    assert r.json()["message"] == "Record does not belong to this order"


def test_get_record_reports_remaining_quantity(client, create_order, create_record, create_assignment):
    order = create_order()
    record = create_record(order["id"], 50)
    create_assignment(record["id"], 20)
    data = client.get(f"/api/v1/records/{record['id']}").json()["data"]
    assert data["remainingQuantity"] == 30
    assert data["trackingNumber"] == f"{order['id']}A"


def test_delete_record_removes_assignments_and_frees_capacity(client, create_order, create_record, create_assignment):
    order = create_order(quantity=100)
    record = create_record(order["id"], 100)
    create_assignment(record["id"], 50)
    r = client.delete(f"/api/v1/orders/{order['id']}/records/{record['id']}")
    assert r.status_code == 200
    assert client.get(f"/api/v1/records/{record['id']}/assignments").status_code == 404
    # Capacity freed by the deleted record is available again
    assert create_record(order["id"], 100)["quantity"] == 100


def test_damage_moves_complete_order_to_qc(client, create_order, create_assignment):
    order = create_order(quantity=50, records=[(50, "N/W")])
    record = client.get(f"/api/v1/orders/{order['id']}/records").json()["data"][0]
    assignment = create_assignment(record["id"], 50)
    client.put(f"/api/v1/records/{record['id']}/assignments/{assignment['id']}", json={"returnQuantity": 48})
    client.put(f"/api/v1/records/{record['id']}/assignments/{assignment['id']}/complete")
    assert client.get(f"/api/v1/orders/{order['id']}").json()["data"]["status"] == "Complete"

    r = client.post(
        f"/api/v1/orders/{order['id']}/damage-records",
        json={"records": [{"recordId": record["id"], "damageCount": 3}]},
    )
    assert r.status_code == 200
    assert r.json()["data"]["status"] == "QC"
    assert r.json()["data"]["quantity"] == 50

    details = client.get(f"/api/v1/orders/{order['id']}/details").json()["data"]
    rec = details["records"][0]
    assert rec["damageCount"] == 3
    assert rec["quantity"] == 50
    assert rec["returnQuantity"] == 48
    assert rec["actualOutput"] == 45
    assert details["summary"]["actualOutput"] == 45


def test_zero_damage_leaves_status_alone(client, create_order):
    order = create_order(quantity=50, records=[(50, "N/W")])
    record = client.get(f"/api/v1/orders/{order['id']}/records").json()["data"][0]
    r = client.post(
        f"/api/v1/orders/{order['id']}/damage-records",
        json={"records": [{"recordId": record["id"], "damageCount": 0}]},
    )
    assert r.json()["data"]["status"] == "Pending"


def test_damage_for_foreign_record_is_rejected(client, create_order, create_record):
    first = create_order()
    second = create_order()
    record = create_record(second["id"], 10)
    r = client.post(
        f"/api/v1/orders/{first['id']}/damage-records",
        json={"records": [{"recordId": record["id"], "damageCount": 1}]},
    )
    assert r.status_code == 400
    assert client.get(f"/api/v1/records/{record['id']}").json()["data"]["damageCount"] == 0
