def _token(client) -> str:
    r = client.post(
        "/api/auth/register",
        json={"email": "instructor@example.com", "password": "Testpass123!", "full_name": "Course Instructor"},
    )
    return r.json()["access_token"]


def test_list_and_filter_courses(client):
    token = _token(client)
    created = client.post(
        "/api/courses",
        json={"title": "UI Design", "description": "Figma basics", "category": "design", "level": "beginner"},
        headers={"Authorization": f"Bearer {token}"},
    )
    assert created.status_code == 201, created.text

    assert len(client.get("/api/courses").json()) == 2
    programming = client.get("/api/courses", params={"category": "programming"}).json()
    assert [c["id"] for c in programming] == ["python-course"]
    assert client.get("/api/courses", params={"category": "cooking"}).json() == []


def test_get_course(client):
    assert client.get("/api/courses/python-course").json()["instructor"] == "Jane Smith"
    assert client.get("/api/courses/nope").status_code == 404


def test_create_course_validates_level(client):
    token = _token(client)
    r = client.post(
        "/api/courses",
        json={"title": "SQL", "description": "Queries", "category": "data", "level": "expert"},
        headers={"Authorization": f"Bearer {token}"},
    )
    assert r.status_code == 422


def test_submit_contact(client, memory_storage):
    r = client.post(
        "/api/contact",
        json={"name": "Ravi", "email": "Ravi@Example.com", "message": "Do you post remote jobs?"},
    )
    assert r.status_code == 201, r.text
    contact = r.json()["contact"]
    assert contact["email"] == "ravi@example.com"
    assert list(memory_storage.contacts) == [contact["id"]]


def test_contact_requires_all_fields(client):
    r = client.post("/api/contact", json={"name": "Ravi", "email": "ravi@example.com", "message": "   "})
    assert r.status_code == 400
    r = client.post("/api/contact", json={"name": "Ravi", "email": "ravi@example.com"})
    assert r.status_code == 422
