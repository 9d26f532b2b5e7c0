def test_get_missing_calendar_returns_404(client):
    res = client.get("/api/calendar/2025/01")

    assert res.status_code == 404
    assert res.get_json()["success"] is False


def test_get_or_create_then_get(client):
    res = client.get("/api/calendar/2025/02/or-create?region=vn")
    assert res.status_code == 200
    body = res.get_json()
    assert body["region"] == "vn"
    assert len(body["days"]) == 28

    res = client.get("/api/calendar/2025/02")
    assert res.status_code == 200
    assert res.get_json()["year"] == "2025"


def test_invalid_month_returns_400(client):
    res = client.get("/api/calendar/2025/13/or-create")

    assert res.status_code == 400
    assert "Month" in res.get_json()["message"]


def test_create_calendar_and_conflict(client):
    payload = {
        "year": "2025",
        "month": "01",
        "days": [
            {"day": 1, "type": "holiday"},
            {"day": 2, "type": "working", "attendance": "wfoffice"},
        ],
    }

    res = client.post("/api/calendar", json=payload)
    assert res.status_code == 201
    assert res.get_json()["calendar_id"] is not None

    res = client.post("/api/calendar", json=payload)
    assert res.status_code == 409


def test_create_calendar_requires_json_body(client):
    res = client.post("/api/calendar", data="not json", content_type="text/plain")

    assert res.status_code == 400


def test_generate_with_holidays(client):
    res = client.post("/api/calendar/generate/2025/01", json={"holidays": [1]})

    assert res.status_code == 201
    days = {d["day"]: d for d in res.get_json()["days"]}
    assert days[1]["type"] == "holiday"
    assert days[4]["type"] == "weekend"


def test_day_updates(client):
    res = client.put("/api/calendar/2025/01/day/2/attendance", json={"attendance": "wfh", "updated_by": "bob"})
    assert res.status_code == 200

    status = client.get("/api/calendar/2025/01/day/2/status").get_json()
    assert status["attendance"] == "wfh"
    assert status["is_updated"] is True

    res = client.put("/api/calendar/2025/01/day/4/attendance", json={"attendance": "wfh"})
    assert res.status_code == 400

    res = client.put("/api/calendar/2025/01/day/2/type", json={"type": "holiday"})
    assert res.status_code == 200

    res = client.delete("/api/calendar/2025/01/day/3/attendance")
    assert res.status_code == 200

    res = client.put("/api/calendar/2025/02/day/30/type", json={"type": "holiday"})
    assert res.status_code == 404


def test_bulk_attendance_reports_skipped_days(client):
    res = client.put(
        "/api/calendar/2025/01/bulk-attendance",
        json={"2": "wfoffice", "3": "wfh", "4": "wfh"},
    )

    assert res.status_code == 200
    body = res.get_json()
    assert sorted(body["applied"]) == [2, 3]
    assert body["skipped"] == {"4": "not a working day"}


def test_bulk_attendance_rejects_non_integer_keys(client):
    res = client.put("/api/calendar/2025/01/bulk-attendance", json={"two": "wfh"})

    assert res.status_code == 400


def test_stats_and_queries(client):
    client.post("/api/calendar/generate/2025/01", json={"holidays": [1]})
    client.put("/api/calendar/2025/01/day/2/attendance", json={"attendance": "wfoffice"})

    stats = client.get("/api/calendar/2025/01/stats").get_json()
    assert stats["holidays"] == 1
    assert stats["office_attendance"] == 1

    assert client.get("/api/calendar/count").get_json() == 1
    assert client.get("/api/calendar/years").get_json() == ["2025"]
    assert client.get("/api/calendar/year/2025/count").get_json() == 1
    assert client.get("/api/calendar/exists/2025/01").get_json() is True
    assert len(client.get("/api/calendar/holidays").get_json()) == 1
    assert len(client.get("/api/calendar/attendance/office").get_json()) == 1
    assert client.get("/api/calendar/attendance/wfh").get_json() == []
    assert client.get("/api/calendar/stats/year/2025").get_json()["total_calendars"] == 1
    assert client.get("/api/calendar/stats/days").get_json()["holidays"] == 1

    res = client.get("/api/calendar/range?start_year=2025&start_month=02&end_year=2025&end_month=01")
    assert res.status_code == 400

    res = client.get("/api/calendar/attendance/rate?min=abc")
    assert res.status_code == 400


def test_latest_on_empty_store_is_404(client):
    assert client.get("/api/calendar/latest").status_code == 404


def test_delete_calendar(client):
    client.get("/api/calendar/2025/01/or-create")

    assert client.delete("/api/calendar/2025/01").status_code == 204
    assert client.delete("/api/calendar/2025/01").status_code == 404


def test_day_routes_reject_non_object_bodies(client):
    assert client.put("/api/calendar/2025/01/day/2/type", json=["holiday"]).status_code == 400
    assert client.put("/api/calendar/2025/01/day/2/status", json=["holiday"]).status_code == 400
    res = client.put("/api/calendar/2025/01/day/2/attendance", json="wfh")

    assert res.status_code == 400
    assert res.get_json()["message"] == "Request body must be a JSON object"
