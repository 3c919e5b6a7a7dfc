from __future__ import annotations


def _add_class(client, name="Class C"):
    return client.post("/api/classes", json={"name": name}).get_json()["class"]


def _add_student(client, class_id, tr_no, **extra):
    payload = {"trNo": tr_no, "name": f"Student {tr_no}", "itsNo": f"ITS-{tr_no}", "classId": class_id, **extra}
    return client.post("/api/students", json=payload)


def test_class_crud_and_cap(client):
    first = _add_class(client)
    _add_class(client, "Class D")

    resp = client.post("/api/classes", json={"name": "Class E"})
    assert resp.status_code == 400
    assert resp.get_json() == {"success": False, "message": "Maximum of 2 classes allowed"}

    assert client.put(f"/api/classes/{first['id']}", json={"name": "Renamed"}).get_json()["class"]["name"] == "Renamed"
    assert client.delete(f"/api/classes/{first['id']}").status_code == 200
    assert client.delete(f"/api/classes/{first['id']}").status_code == 404
    assert [c["name"] for c in client.get("/api/classes").get_json()["classes"]] == ["Class D"]


def test_non_json_body_is_rejected(client):
    resp = client.post("/api/classes", data="name=x")

    assert resp.status_code == 400
    assert resp.get_json()["success"] is False


def test_student_endpoints(client):
    class_id = _add_class(client)["id"]

    created = _add_student(client, class_id, "1", division="X")
    assert created.status_code == 201
    student = created.get_json()["student"]
    assert student["trNo"] == "1"

    dup = _add_student(client, class_id, "1")
    assert dup.status_code == 400
    assert dup.get_json()["message"] == "Tr. No. already exists"

    updated = client.put(
        f"/api/students/{student['id']}",
        json={**student, "name": "Renamed"},
    )
    assert updated.get_json()["student"]["name"] == "Renamed"

    listed = client.get("/api/students", query_string={"classId": class_id, "search": "ren"}).get_json()
    assert [s["name"] for s in listed["students"]] == ["Renamed"]
    assert client.get(f"/api/classes/{class_id}/divisions").get_json()["divisions"] == ["X"]
    assert client.get("/api/students", query_string={"sort": "bogus"}).status_code == 400

    assert client.delete(f"/api/students/{student['id']}").status_code == 200
    assert client.delete(f"/api/students/{student['id']}").status_code == 404


def test_attendance_sheet_flow(client):
    class_id = _add_class(client)["id"]
    ids = [_add_student(client, class_id, n).get_json()["student"]["id"] for n in ("1", "2")]
    body = {"classId": class_id, "date": "2024-01-01"}

    opened = client.post("/api/attendance/sheet", json=body).get_json()
    assert opened["sheet"]["mode"] == "new"
    assert opened["sheet"]["presentCount"] == 0
    assert opened["sheet"]["total"] == 2

    rolled = client.post("/api/attendance/roll", json={**body, "trNo": "1"}).get_json()
    assert rolled["message"] == "Student 1 marked present"
    assert rolled["sheet"]["presentCount"] == 1

    missing = client.post("/api/attendance/roll", json={**body, "trNo": "9"})
    assert missing.status_code == 404
    assert missing.get_json()["message"] == "Student with roll number 9 not found"

    toggled = client.post("/api/attendance/toggle", json={**body, "studentId": ids[0]}).get_json()
    assert toggled["message"] == "Absent marked successfully"

    reopened = client.post("/api/attendance/sheet", json=body).get_json()
    assert reopened["sheet"]["mode"] == "edit"

    everyone = client.post("/api/attendance/all-present", json=body).get_json()
    assert everyone["sheet"]["presentCount"] == 2

    records = client.get("/api/attendance", query_string={"date": "2024-01-01", "classId": class_id}).get_json()
    assert {r["status"] for r in records["records"]} == {"present"}
    assert client.get("/api/attendance/dates").get_json()["dates"] == ["2024-01-01"]

    deleted = client.delete("/api/attendance/2024-01-01").get_json()
    assert deleted["deleted"] == 2
    assert client.get("/api/attendance/dates", query_string={"classId": class_id}).get_json()["dates"] == []


def test_attendance_requires_known_class_and_valid_input(client):
    assert client.post("/api/attendance/sheet", json={"date": "2024-01-01"}).status_code == 400
    assert client.post("/api/attendance/sheet", json={"classId": "nope", "date": "2024-01-01"}).status_code == 404

    class_id = _add_class(client)["id"]
    student_id = _add_student(client, class_id, "1").get_json()["student"]["id"]
    bad_date = client.post("/api/attendance/sheet", json={"classId": class_id, "date": "01/01/2024"})
    assert bad_date.status_code == 400

    bad_status = client.post(
        "/api/attendance/mark", json={"date": "2024-01-01", "studentId": student_id, "status": "late"}
    )
    assert bad_status.status_code == 400

    marked = client.post(
        "/api/attendance/mark", json={"date": "2024-01-01", "studentId": student_id, "status": "present"}
    )
    assert marked.get_json()["record"] == {
        "date": "2024-01-01",
        "classId": class_id,
        "studentId": student_id,
        "status": "present",
    }


def test_reports_and_csv_downloads(client):
    class_id = _add_class(client)["id"]
    for n in ("1", "2"):
        _add_student(client, class_id, n)
    client.post("/api/attendance/roll", json={"classId": class_id, "date": "2024-01-03", "trNo": "2"})

    stats = client.get(
        "/api/reports/stats", query_string={"classId": class_id, "mode": "weekly", "date": "2024-01-03"}
    ).get_json()
    assert (stats["start"], stats["end"]) == ("2024-01-01", "2024-01-07")
    assert stats["stats"]["totalDays"] == 1

    daily = client.get("/api/reports/daily", query_string={"classId": class_id, "date": "2024-01-03"}).get_json()
    assert daily["summary"] == {"present": 1, "absent": 1}

    period = client.get(
        "/api/reports/period", query_string={"classId": class_id, "start": "2024-01-01", "end": "2024-01-31"}
    ).get_json()
    assert sorted(s["attendanceRate"] for s in period["students"]) == [0.0, 100.0]

    assert client.get("/api/reports/stats", query_string={"classId": class_id, "mode": "yearly"}).status_code == 400

    export = client.get("/api/reports/export.csv", query_string={"start": "2024-01-01", "end": "2024-01-31"})
    assert export.mimetype == "text/csv"
    assert "attendance_report_20240101_20240131.csv" in export.headers["Content-Disposition"]
    lines = export.data.decode("utf-8-sig").splitlines()
    assert lines[0] == "Date,Class,Division,Subject,Student Name,Tr. No.,ITS No.,Status"
    assert len(lines) == 3

    absent = client.get(
        "/api/reports/date.csv", query_string={"classId": class_id, "date": "2024-01-03", "view": "absent"}
    )
    assert absent.data.decode("utf-8-sig").splitlines()[1] == "1,Student 1,,,absent"


def test_unknown_roll_number_does_not_create_the_sheet(client):
    class_id = _add_class(client)["id"]
    _add_student(client, class_id, "1")

    resp = client.post("/api/attendance/roll", json={"classId": class_id, "date": "2024-02-01", "trNo": "9"})

    assert resp.status_code == 404
    assert client.get("/api/attendance", query_string={"date": "2024-02-01"}).get_json()["records"] == []
    assert client.get("/api/attendance/dates").get_json()["dates"] == []


def test_partial_filters_are_rejected(client):
    class_id = _add_class(client)["id"]

    only_start = client.get("/api/reports/stats", query_string={"classId": class_id, "start": "2024-01-01"})
    only_end = client.get("/api/reports/period", query_string={"classId": class_id, "end": "2024-01-31"})
    division_only = client.get("/api/attendance", query_string={"date": "2024-01-01", "division": "X"})

    assert only_start.status_code == 400
    assert only_start.get_json()["message"] == "Provide both start and end, or neither"
    assert only_end.status_code == 400
    assert division_only.status_code == 400


def test_dates_and_daily_report_carry_display_labels(client):
    class_id = _add_class(client)["id"]
    _add_student(client, class_id, "1")
    client.post("/api/attendance/sheet", json={"classId": class_id, "date": "2023-05-05"})

    dates = client.get("/api/attendance/dates").get_json()
    daily = client.get("/api/reports/daily", query_string={"classId": class_id, "date": "2023-05-05"}).get_json()

    assert dates["labels"] == [{"date": "2023-05-05", "label": "May 5, 2023"}]
    assert (daily["dayName"], daily["formattedDate"]) == ("Friday", "May 5, 2023")
