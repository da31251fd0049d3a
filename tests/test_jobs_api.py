def _token(client, email: str = "poster@example.com") -> str:
    r = client.post(
        "/api/auth/register",
        json={"email": email, "password": "Testpass123!", "full_name": "Poster"},
    )
    return r.json()["access_token"]


def _auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def _job_body(company_id: str, **overrides) -> dict:
    body = {
        "company_id": company_id,
        "title": "React Developer",
        "description": "Build UIs",
        "requirements": "Hooks, state management",
        "qualifications": "Any graduate",
        "skills": "React, TypeScript",
        "experience_level": "fresher",
        "location": "Hyderabad, India",
        "job_type": "full-time",
        "closing_date": "2030-01-31T00:00:00Z",
    }
    body.update(overrides)
    return body


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["storage"] == "MemoryStorage"
    assert client.get("/api/health").status_code == 200


def test_sample_data_is_listed(client):
    r = client.get("/api/jobs")
    assert r.status_code == 200, r.text
    [job] = r.json()
    assert job["id"] == "job-1"
    assert job["company"]["name"] == "Accenture"

    companies = client.get("/api/companies").json()
    assert [c["id"] for c in companies] == ["accenture-id", "tcs-id", "infosys-id"]


def test_job_filters_via_query(client):
    token = _token(client)
    client.post("/api/jobs", json=_job_body("tcs-id"), headers=_auth_headers(token))
    client.post(
        "/api/jobs",
        json=_job_body("infosys-id", title="Java Lead", skills="Java", experience_level="experienced"),
        headers=_auth_headers(token),
    )

    react = client.get("/api/jobs", params={"search": "REACT"}).json()
    assert [j["title"] for j in react] == ["React Developer"]

    fresher_blr = client.get("/api/jobs", params={"experience_level": "fresher", "location": "bengaluru"}).json()
    assert [j["id"] for j in fresher_blr] == ["job-1"]

    assert client.get("/api/jobs", params={"experience_level": "senior"}).status_code == 422


def test_get_job_and_404(client):
    r = client.get("/api/jobs/job-1")
    assert r.status_code == 200
    assert r.json()["company"]["id"] == "accenture-id"
    assert client.get("/api/jobs/nope").status_code == 404


def test_create_job_requires_auth(client):
    assert client.post("/api/jobs", json=_job_body("tcs-id")).status_code == 401


def test_create_job_end_to_end_with_new_company(client):
    token = _token(client)
    company = client.post(
        "/api/companies",
        json={"name": "Startup Inc", "location": "Pune"},
        headers=_auth_headers(token),
    )
    assert company.status_code == 201, company.text
    company = company.json()

    created = client.post("/api/jobs", json=_job_body(company["id"]), headers=_auth_headers(token))
    assert created.status_code == 201, created.text
    job = created.json()
    assert job["is_active"] is True
    assert job["experience_min"] is None

    fetched = client.get(f"/api/jobs/{job['id']}").json()
    assert fetched["company"] == company


def test_create_job_with_unknown_company_is_rejected(client):
    token = _token(client)
    r = client.post("/api/jobs", json=_job_body("no-such-company"), headers=_auth_headers(token))
    assert r.status_code == 400, r.text
    assert r.json()["details"]["company_id"] == "no-such-company"


def test_create_job_with_inverted_experience_range_is_rejected(client):
    token = _token(client)
    r = client.post(
        "/api/jobs",
        json=_job_body("tcs-id", experience_min=5, experience_max=1),
        headers=_auth_headers(token),
    )
    assert r.status_code == 400, r.text


def test_patch_job_only_touches_given_fields(client):
    token = _token(client)
    before = client.get("/api/jobs/job-1").json()

    r = client.patch("/api/jobs/job-1", json={"is_active": False}, headers=_auth_headers(token))
    assert r.status_code == 200, r.text

    after = client.get("/api/jobs/job-1").json()
    assert after["is_active"] is False
    after["is_active"] = True
    assert after == before


def test_patch_unknown_job(client):
    token = _token(client)
    r = client.patch("/api/jobs/nope", json={"is_active": False}, headers=_auth_headers(token))
    assert r.status_code == 404


def test_company_lookup(client):
    assert client.get("/api/companies/tcs-id").json()["name"] == "Tata Consultancy Services"
    assert client.get("/api/companies/nope").status_code == 404
