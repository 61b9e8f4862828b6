"""Liveness and the cached dashboard summary."""
from washline.core.redis import DASHBOARD_CACHE_KEY


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_unknown_route_uses_envelope(client):
    r = client.get("/api/v1/nope")
    assert r.status_code == 404
    assert r.json()["success"] is False


def test_dashboard_summary_is_cached(client, fake_redis, create_order):
    create_order(quantity=100, records=[(100, "N/W")])
    r = client.get("/api/v1/dashboard/summary")
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["totalOrders"] == 1
    assert data["ordersByStatus"]["Pending"] == 1
    assert data["totalOrderQuantity"] == 100
    assert DASHBOARD_CACHE_KEY in fake_redis.store
    assert fake_redis.ttls[DASHBOARD_CACHE_KEY] == 60

    # Served from cache until the TTL runs out
    create_order(quantity=5)
    assert client.get("/api/v1/dashboard/summary").json()["data"]["totalOrders"] == 1

    del fake_redis.store[DASHBOARD_CACHE_KEY]
    assert client.get("/api/v1/dashboard/summary").json()["data"]["totalOrders"] == 2
