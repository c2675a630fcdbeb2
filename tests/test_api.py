from tripplanner.models import ExpenseCategory


def _create_trip(client, **overrides):
    payload = {"name": "Lisbon", "start_date": "2024-06-01", "end_date": "2024-06-03"}
    payload.update(overrides)
    resp = client.post("/trips", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_health(client):
    assert client.get("/health").json()["status"] == "ok"


def test_create_and_extend_trip(client):
    trip = _create_trip(client)
    assert [d["date"] for d in trip["days"]] == ["2024-06-01", "2024-06-02", "2024-06-03"]

    resp = client.put(
        f"/trips/{trip['id']}/dates",
        json={"start_date": "2024-06-01", "end_date": "2024-06-05"},
    )
    assert resp.status_code == 200
    days = resp.json()["days"]
    assert len(days) == 5
    assert [d["id"] for d in days[:3]] == [d["id"] for d in trip["days"]]


def test_inverted_range_is_labeled(client):
    resp = client.post(
        "/trips", json={"name": "Bad", "start_date": "2024-06-03", "end_date": "2024-06-01"}
    )
    assert resp.status_code == 400
    assert resp.json()["error"] == "invalid_range"


def test_unknown_trip_and_day_are_labeled(client):
    trip = _create_trip(client)
    missing = client.get("/trips/00000000-0000-0000-0000-000000000000")
    assert missing.status_code == 404
    assert missing.json()["error"] == "trip_not_found"

    out_of_range = client.put(f"/trips/{trip['id']}/days/3/title", json={"title": "x"})
    assert out_of_range.status_code == 404
    assert out_of_range.json()["error"] == "day_index_out_of_range"


def test_day_mutations(client):
    trip = _create_trip(client)
    base = f"/trips/{trip['id']}/days/0"

    assert client.put(f"{base}/title", json={"title": "Arrival"}).json()["title"] == "Arrival"
    client.post(f"{base}/activities", json={"time": "2024-06-01T20:00:00", "title": "Dinner", "category": "dining"})
    client.post(f"{base}/activities", json={"time": "2024-06-01T09:00:00", "title": "Museum"})
    ordered = client.get(f"{base}/activities").json()
    assert [a["title"] for a in ordered] == ["Museum", "Dinner"]

    transport = client.put(f"{base}/transportation", json={"mode": "Metro", "time": "2024-06-01T08:00:00"})
    assert transport.json()["transportation"]["mode"] == "Metro"

    blank = client.post(f"{base}/activities", json={"time": "2024-06-01T09:00:00", "title": " "})
    assert blank.status_code == 422
    assert blank.json()["error"] == "validation_error"


def test_foreign_expense_flow(client, provider):
    trip = _create_trip(client)
    budget_url = f"/trips/{trip['id']}/days/0/budget"
    assert client.put(budget_url, json={"total_budget": "250", "currency": "EUR"}).status_code == 200

    resp = client.post(
        f"{budget_url}/expenses",
        json={"amount": "100", "currency": "USD", "category": ExpenseCategory.food.value},
    )
    assert resp.status_code == 201, resp.text

    summary = client.get(budget_url).json()
    assert summary["spent"] == 92.0
    assert summary["remaining"] == 158.0
    assert summary["category_totals"] == {"food": 92.0}
    assert provider.calls == ["USD"]


def test_conversion_failure_is_labeled_and_atomic(client, provider):
    trip = _create_trip(client)
    budget_url = f"/trips/{trip['id']}/days/0/budget"
    provider.fail = True

    resp = client.post(f"{budget_url}/expenses", json={"amount": "10", "currency": "USD"})
    assert resp.status_code == 502
    assert resp.json()["error"] == "conversion_unavailable"
    assert client.get(budget_url).json()["expense_count"] == 0


def test_remove_expense(client):
    trip = _create_trip(client)
    budget_url = f"/trips/{trip['id']}/days/0/budget"
    added = client.post(f"{budget_url}/expenses", json={"amount": "12.40", "currency": "EUR"}).json()
    expense_id = added["expenses"][0]["id"]

    assert client.delete(f"{budget_url}/expenses/{expense_id}").json()["expenses"] == []


def test_rates_endpoints(client, provider):
    rate = client.get("/rates/usd/eur").json()
    assert rate["base_currency"] == "USD"
    assert float(rate["rate"]) == 0.92

    converted = client.get("/rates/convert", params={"amount": "100", "base": "USD", "target": "GBP"})
    assert converted.json()["converted"] == 79.0
    assert provider.calls == ["USD"]

    cache = client.get("/rates/cache").json()
    assert [c["base_currency"] for c in cache] == ["USD"]
    assert cache[0]["fresh"] is True

    assert client.delete("/rates/cache/USD").status_code == 200
    assert client.delete("/rates/cache/USD").status_code == 404


def test_missing_rate_is_labeled(client):
    resp = client.get("/rates/USD/JPY")
    assert resp.status_code == 502
    assert resp.json()["error"] == "rate_not_available"


def test_delete_trip(client):
    trip = _create_trip(client)
    assert client.delete(f"/trips/{trip['id']}").status_code == 204
    assert client.get("/trips").json() == []
    assert client.delete(f"/trips/{trip['id']}").status_code == 204


def test_unknown_route(client):
    resp = client.get("/nope")
    assert resp.status_code == 404
    assert resp.json()["error"] == "not_found"


def test_common_currencies(client):
    codes = client.get("/rates/currencies").json()
    assert "EUR" in codes and "USD" in codes
