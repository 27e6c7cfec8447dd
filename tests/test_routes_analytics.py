import pytest

from tests._fakes import STAFF_KEY

STAFF = {"X-Staff-Key": STAFF_KEY}
WINDOW = {"startDate": "2000-01-01", "endDate": "2100-12-31"}


def _place(client, items):
    resp = client.post("/api/orders", json={"table_id": 1, "items": items}, headers=STAFF)
    assert resp.status_code == 200
    return resp.json()["data"]


def _pay(client, order, payment_type="Cash"):
    resp = client.patch(f"/api/orders/{order['id']}/pay", json={"payment_type": payment_type})
    assert resp.status_code == 200
    return resp.json()["data"]


@pytest.fixture
def sales(client):
    first = _pay(client, _place(client, [{"item_id": 1, "quantity": 2}, {"item_id": 2}]))
    second = _pay(client, _place(client, [{"item_id": 1}]), "UPI")
    pending = _place(client, [{"item_id": 3, "quantity": 5}])
    return first, second, pending


def test_total_revenue_counts_paid_orders(client, sales):
    resp = client.get("/api/admin/analytics/total-revenue", params=WINDOW)
    assert resp.json() == {"ok": True, "data": {"totalRevenue": 180.0}}


def test_summary_metric(client, sales):
    data = client.get("/api/admin/analytics/summary", params=WINDOW).json()["data"]
    assert data["totalOrders"] == 2
    assert data["totalItemsSold"] == 4
    assert data["averageOrderValue"] == 90.0
    assert data["mostSoldItem"] == {"name": "Masala Chai", "totalSold": 3}
    assert data["peakHour"] != "N/A"


def test_default_window_is_today(client, sales):
    data = client.get("/api/admin/analytics/total-orders").json()["data"]
    assert data == {"totalOrders": 2}


def test_unknown_metric(client):
    resp = client.get("/api/admin/analytics/profit")
    assert resp.status_code == 404


def test_bad_dates(client):
    resp = client.get("/api/admin/analytics/total-orders", params={"startDate": "soon"})
    assert resp.status_code == 400
    inverted = {"startDate": "2024-05-02", "endDate": "2024-05-01"}
    assert client.get("/api/admin/analytics/total-orders", params=inverted).status_code == 400


def test_pending_queue_oldest_first(client, sales):
    _, _, pending = sales
    later = _place(client, [{"item_id": 2}])
    data = client.get("/api/admin/orders").json()["data"]
    assert [o["id"] for o in data] == [pending["id"], later["id"]]


def test_history_filters_and_revenue(client, sales):
    first, second, pending = sales
    history = client.get("/api/admin/orders/history").json()["data"]
    assert [o["id"] for o in history] == [pending["id"], second["id"], first["id"]]

    paid = client.get("/api/admin/orders/history", params={"statuses": "paid"}).json()["data"]
    assert {o["id"] for o in paid} == {first["id"], second["id"]}

    revenue = client.get("/api/admin/orders/history", params={"aggregate": "revenue"})
    assert revenue.json()["data"] == {"totalRevenue": 180.0}


def test_history_rejects_unknown_status(client):
    resp = client.get("/api/admin/orders/history", params={"statuses": "refunded"})
    assert resp.status_code == 400
