import pytest
from fastapi import HTTPException

from backend.app.database import normalize_database_url
from backend.app.utils.jwt import create_access_token, decode_access_token
from backend.app.utils.security import codes_match, hash_password, verify_password
from backend.app.utils.validation import (
    validate_email,
    validate_otp_code,
    validate_password,
    validate_string_field,
)


def test_hash_password_uses_cost_10_and_salts():
    first = hash_password("same-password")
    second = hash_password("same-password")
    assert first.startswith("$2b$10$")
    assert first != second
    assert verify_password("same-password", first)
    assert verify_password("same-password", second)
    assert not verify_password("other-password", first)


def test_hash_password_rejects_empty_and_oversized():
    with pytest.raises(ValueError):
        hash_password("")
    with pytest.raises(ValueError):
        hash_password("x" * 73)


def test_verify_password_handles_garbage():
    assert verify_password("", "$2b$10$abc") is False
    assert verify_password("pw", "") is False
    assert verify_password("pw", "not-a-bcrypt-hash") is False


def test_codes_match():
    assert codes_match("123456", "123456")
    assert not codes_match("123456", "123457")
    assert not codes_match("123456", None)


def test_access_token_round_trip_and_tampering():
    token = create_access_token({"sub": "user-1"})
    assert decode_access_token(token)["sub"] == "user-1"
    assert decode_access_token(token + "x") is None
    assert decode_access_token("not.a.token") is None


def test_expired_access_token_is_rejected():
    token = create_access_token({"sub": "user-1"}, expires_minutes=-1)
    assert decode_access_token(token) is None


def test_validate_email_normalizes():
    assert validate_email("  TEST@EXAMPLE.COM  ") == "test@example.com"
    with pytest.raises(HTTPException) as exc:
        validate_email("invalid")
    assert exc.value.status_code == 400


def test_validate_password_bounds():
    validate_password("123456")
    with pytest.raises(HTTPException):
        validate_password("12345")
    with pytest.raises(HTTPException):
        validate_password("x" * 73)


def test_validate_string_field():
    assert validate_string_field("  Asha  ", "Name") == "Asha"
    assert validate_string_field(None, "Phone", required=False) is None
    assert validate_string_field("   ", "Phone", required=False) is None
    with pytest.raises(HTTPException):
        validate_string_field("   ", "Name")
    with pytest.raises(HTTPException):
        validate_string_field("x" * 11, "Name", max_length=10)


def test_validate_otp_code():
    assert validate_otp_code(" 012345 ") == "012345"
    for bad in ("12345", "1234567", "abcdef", ""):
        with pytest.raises(HTTPException):
            validate_otp_code(bad)


def test_normalize_database_url():
    assert normalize_database_url("mysql://u:p@h/db") == "mysql+pymysql://u:p@h/db"
    assert normalize_database_url(" sqlite:///x.db ") == "sqlite:///x.db"
