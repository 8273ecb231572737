def test_create_and_fetch_student(client, make_student):
    student = make_student(fullName="Ahmed Khan", phone="+923001234567")
    assert student["isActive"] is True
    assert student["feeDueDate"] == 10

    resp = client.get(f"/api/students/{student['id']}")
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is True
    assert body["data"]["fullName"] == "Ahmed Khan"


def test_create_student_validation(client):
    resp = client.post("/api/students", json={"fullName": "", "phone": "+923001234567"})
    assert resp.status_code == 400
    assert resp.get_json() == {"success": False, "error": "Full name is required"}

    base = {
        "fullName": "X", "phone": "+923001234567", "flatName": "F", "flatNo": "1",
        "monthlyFee": 100, "feeDueDate": 32,
    }
    resp = client.post("/api/students", json=base)
    assert resp.status_code == 400
    assert "between 1 and 31" in resp.get_json()["error"]

    resp = client.post("/api/students", json={**base, "feeDueDate": 5, "monthlyFee": -1})
    assert resp.status_code == 400

    resp = client.post("/api/students", json={**base, "feeDueDate": 5, "phone": "call me"})
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Please enter a valid phone number"


def test_phone_must_be_unique(client, make_student):
    make_student(phone="+923001234567")
    resp = client.post("/api/students", json={
        "fullName": "Twin", "phone": "+923001234567", "flatName": "F", "flatNo": "2",
        "monthlyFee": 100, "feeDueDate": 5,
    })
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Phone number already exists"


def test_list_search_and_active_filter(client, make_student):
    make_student(fullName="Ahmed Khan", flatName="Noor Residency")
    other = make_student(fullName="Sana Iqbal")
    client.patch(f"/api/students/{other['id']}/deactivate")

    body = client.get("/api/students").get_json()
    assert body["count"] == 2

    body = client.get("/api/students?search=noor").get_json()
    assert [s["fullName"] for s in body["data"]] == ["Ahmed Khan"]

    body = client.get("/api/students?isActive=false").get_json()
    assert [s["id"] for s in body["data"]] == [other["id"]]


def test_update_student(client, make_student):
    student = make_student()
    payload = {
        "fullName": "Renamed", "phone": student["phone"], "flatName": "F", "flatNo": "9",
        "monthlyFee": 2500, "feeDueDate": 15,
    }
    resp = client.put(f"/api/students/{student['id']}", json=payload)
    assert resp.status_code == 200
    assert resp.get_json()["data"]["monthlyFee"] == 2500

    resp = client.put("/api/students/999", json=payload)
    assert resp.status_code == 404
    assert resp.get_json()["error"] == "Student not found"


def test_delete_is_logical_and_reversible(client, make_student):
    student = make_student()
    resp = client.delete(f"/api/students/{student['id']}")
    assert resp.status_code == 200
    assert resp.get_json() == {"success": True, "data": {}}

    fetched = client.get(f"/api/students/{student['id']}").get_json()["data"]
    assert fetched["isActive"] is False

    resp = client.patch(f"/api/students/{student['id']}/activate")
    assert resp.get_json()["data"]["isActive"] is True


def test_unknown_student_is_404(client):
    resp = client.get("/api/students/12345")
    assert resp.status_code == 404
    assert resp.get_json()["success"] is False


def test_monthly_fee_must_be_finite(client):
    base = {"fullName": "X", "phone": "+923001234567", "flatName": "F", "flatNo": "1", "feeDueDate": 5}
    for fee in ("inf", "Infinity", "nan"):
        resp = client.post("/api/students", json={**base, "monthlyFee": fee})
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Monthly fee must be a number"
    assert client.get("/api/students").get_json()["count"] == 0


def test_is_active_flag_parsing(client, make_student):
    student = make_student()
    body = {
        "fullName": student["fullName"], "phone": student["phone"], "flatName": "F", "flatNo": "1",
        "monthlyFee": 100, "feeDueDate": 5,
    }

    resp = client.put(f"/api/students/{student['id']}", json={**body, "isActive": "false"})
    assert resp.get_json()["data"]["isActive"] is False

    resp = client.put(f"/api/students/{student['id']}", json={**body, "isActive": True})
    assert resp.get_json()["data"]["isActive"] is True

    resp = client.put(f"/api/students/{student['id']}", json={**body, "isActive": "no"})
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "isActive must be true or false"
