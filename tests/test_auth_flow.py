from backend.app.api import auth as auth_api


def _register(client, *, email: str, password: str = "Testpass123!", full_name: str = "Test User", phone=None):
    body = {"email": email, "password": password, "full_name": full_name}
    if phone is not None:
        body["phone"] = phone
    return client.post("/api/auth/register", json=body)


def _login(client, *, email: str, password: str):
    return client.post("/api/auth/login", json={"email": email, "password": password})


def _auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def test_register_success_returns_token_and_hides_password(client):
    r = _register(client, email="Seeker@Example.com", full_name="Seeker", phone="9999999999")
    assert r.status_code == 201, r.text
    data = r.json()
    assert data["user"]["email"] == "seeker@example.com"
    assert data["user"]["phone"] == "9999999999"
    assert "password" not in data["user"]
    assert isinstance(data.get("access_token"), str) and len(data["access_token"]) > 10


def test_register_duplicate_email_conflicts(client):
    _register(client, email="dup@example.com")
    r = _register(client, email="DUP@example.com")
    assert r.status_code == 409, r.text
    assert r.json()["success"] is False


def test_register_validation(client):
    assert _register(client, email="not-an-email").status_code == 400
    assert _register(client, email="weak@example.com", password="123").status_code == 400
    assert _register(client, email="noname@example.com", full_name="   ").status_code == 400


def test_login_success_and_failures_look_alike(client):
    _register(client, email="login@example.com")

    ok = _login(client, email="login@example.com", password="Testpass123!")
    assert ok.status_code == 200, ok.text
    assert ok.json()["user"]["email"] == "login@example.com"

    wrong_password = _login(client, email="login@example.com", password="wrong-pass")
    unknown_user = _login(client, email="nobody@example.com", password="Testpass123!")
    assert wrong_password.status_code == unknown_user.status_code == 401
    assert wrong_password.json() == unknown_user.json()


def test_logout_endpoint_exists(client):
    r = client.post("/api/auth/logout")
    assert r.status_code == 200, r.text
    assert "message" in r.json()


def test_me_requires_valid_token(client):
    assert client.get("/api/auth/me").status_code == 401
    assert client.get("/api/auth/me", headers=_auth_headers("garbage")).status_code == 401

    token = _register(client, email="me@example.com", full_name="Me").json()["access_token"]
    r = client.get("/api/auth/me", headers=_auth_headers(token))
    assert r.status_code == 200, r.text
    assert r.json()["user"]["full_name"] == "Me"


def test_update_profile_merges_fields(client):
    token = _register(client, email="profile@example.com", full_name="Old", phone="111").json()["access_token"]

    r = client.patch("/api/auth/me", json={"full_name": "New"}, headers=_auth_headers(token))
    assert r.status_code == 200, r.text
    assert r.json()["user"]["full_name"] == "New"
    assert r.json()["user"]["phone"] == "111"


def test_password_reset_flow(client, monkeypatch):
    monkeypatch.setattr(auth_api, "generate_otp", lambda: "123456")
    _register(client, email="forgot@example.com", password="old-pass-1")

    r = client.post("/api/auth/forgot-password", json={"email": "forgot@example.com"})
    assert r.status_code == 200, r.text
    assert r.json()["expires_in_minutes"] == 5

    bad = client.post("/api/auth/verify-otp", json={"email": "forgot@example.com", "otp": "654321"})
    assert bad.status_code == 400

    good = client.post("/api/auth/verify-otp", json={"email": "forgot@example.com", "otp": "123456"})
    assert good.status_code == 200, good.text

    reset = client.post(
        "/api/auth/reset-password",
        json={"email": "forgot@example.com", "otp": "123456", "new_password": "new-pass-2"},
    )
    assert reset.status_code == 200, reset.text

    assert _login(client, email="forgot@example.com", password="new-pass-2").status_code == 200
    assert _login(client, email="forgot@example.com", password="old-pass-1").status_code == 401

    # The code is cleared once used.
    again = client.post(
        "/api/auth/reset-password",
        json={"email": "forgot@example.com", "otp": "123456", "new_password": "third-pass-3"},
    )
    assert again.status_code == 400


def test_reset_password_rejects_expired_otp(client, clock, monkeypatch):
    monkeypatch.setattr(auth_api, "generate_otp", lambda: "222222")
    _register(client, email="late@example.com", password="old-pass-1")
    client.post("/api/auth/forgot-password", json={"email": "late@example.com"})

    clock.advance(minutes=6)
    r = client.post(
        "/api/auth/reset-password",
        json={"email": "late@example.com", "otp": "222222", "new_password": "new-pass-2"},
    )
    assert r.status_code == 400
    assert _login(client, email="late@example.com", password="old-pass-1").status_code == 200


def test_forgot_password_does_not_reveal_unknown_email(client, memory_storage, monkeypatch):
    monkeypatch.setattr(auth_api, "generate_otp", lambda: "555555")
    _register(client, email="known@example.com")

    known = client.post("/api/auth/forgot-password", json={"email": "known@example.com"})
    unknown = client.post("/api/auth/forgot-password", json={"email": "ghost@example.com"})

    assert known.status_code == unknown.status_code == 200
    assert known.json() == unknown.json()
    assert memory_storage.verify_password_reset_otp("known@example.com", "555555") is True
    assert memory_storage.verify_password_reset_otp("ghost@example.com", "555555") is False


def test_forgot_password_sends_email_when_smtp_configured(client, monkeypatch):
    sent = []
    monkeypatch.setattr(auth_api, "smtp_configured", lambda: True)
    monkeypatch.setattr(auth_api, "generate_otp", lambda: "333333")
    monkeypatch.setattr(auth_api, "send_password_reset_email", lambda **kwargs: sent.append(kwargs))
    _register(client, email="mail@example.com", full_name="Mail User")

    r = client.post("/api/auth/forgot-password", json={"email": "mail@example.com"})

    assert r.status_code == 200, r.text
    assert sent == [{"to_email": "mail@example.com", "full_name": "Mail User", "code": "333333", "ttl_minutes": 5}]


def test_forgot_password_clears_otp_when_email_fails(client, memory_storage, monkeypatch):
    def _boom(**kwargs):
        raise OSError("smtp down")

    monkeypatch.setattr(auth_api, "smtp_configured", lambda: True)
    monkeypatch.setattr(auth_api, "generate_otp", lambda: "444444")
    monkeypatch.setattr(auth_api, "send_password_reset_email", _boom)
    _register(client, email="fail@example.com")

    r = client.post("/api/auth/forgot-password", json={"email": "fail@example.com"})

    assert r.status_code == 502
    assert memory_storage.verify_password_reset_otp("fail@example.com", "444444") is False
