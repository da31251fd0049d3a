import logging
import secrets

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from ..config import OTP_TTL_MINUTES
from ..services.emailer import send_password_reset_email, smtp_configured
from ..storage.base import Storage
from ..storage.records import User
from ..utils.dependencies import get_current_user, get_storage
from ..utils.error_handlers import get_error_message
from ..utils.jwt import create_access_token
from ..utils.validation import validate_email, validate_otp_code, validate_password, validate_string_field

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


class RegisterRequest(BaseModel):
    email: str
    password: str
    full_name: str
    phone: str | None = None


class LoginRequest(BaseModel):
    email: str
    password: str


class ProfileUpdate(BaseModel):
    full_name: str | None = None
    phone: str | None = None


class ForgotPasswordRequest(BaseModel):
    email: str


class VerifyOtpRequest(BaseModel):
    email: str
    otp: str


class ResetPasswordRequest(BaseModel):
    email: str
    otp: str
    new_password: str


def _session_payload(user: User) -> dict:
    token = create_access_token({"sub": user.id})
    return {
        "access_token": token,
        "token_type": "bearer",
        "user": user.as_public(),
    }


def generate_otp() -> str:
    return f"{secrets.randbelow(1_000_000):06d}"


@router.post("/register", status_code=201)
def register(payload: RegisterRequest, storage: Storage = Depends(get_storage)):
    email = validate_email(payload.email)
    validate_password(payload.password)
    full_name = validate_string_field(payload.full_name, "Full name", max_length=255)
    phone = validate_string_field(payload.phone, "Phone", max_length=30, required=False)

    # DuplicateEmailError propagates to the app-level handler (409).
    user = storage.create_user(email=email, full_name=full_name, password=payload.password, phone=phone)
    logger.info("Registered user %s", user.id)

    body = _session_payload(user)
    body["message"] = "User created successfully"
    return body


@router.post("/login")
def login(payload: LoginRequest, storage: Storage = Depends(get_storage)):
    email = validate_email(payload.email)
    if not payload.password:
        raise HTTPException(status_code=400, detail="Password is required")

    user = storage.validate_user(email, payload.password)
    if user is None:
        raise HTTPException(status_code=401, detail=get_error_message("invalid_credentials"))

    return _session_payload(user)


@router.post("/logout")
def logout():
    return {"message": "Logged out successfully"}


@router.get("/me")
def me(user: User = Depends(get_current_user)):
    return {"user": user.as_public()}


@router.patch("/me")
def update_me(
    payload: ProfileUpdate,
    user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    changes = {}
    if "full_name" in payload.model_fields_set:
        changes["full_name"] = validate_string_field(payload.full_name, "Full name", max_length=255)
    if "phone" in payload.model_fields_set:
        changes["phone"] = validate_string_field(payload.phone, "Phone", max_length=30, required=False)

    updated = storage.update_user(user.id, **changes) if changes else user
    if updated is None:
        raise HTTPException(status_code=401, detail=get_error_message("session_expired"))
    return {"user": updated.as_public()}


@router.post("/forgot-password")
def forgot_password(payload: ForgotPasswordRequest, storage: Storage = Depends(get_storage)):
    email = validate_email(payload.email)
    sent = {
        "message": "If an account exists for this email, an OTP has been sent",
        "expires_in_minutes": OTP_TTL_MINUTES,
    }
    user = storage.get_user_by_email(email)
    if user is None:
        # Unknown emails get the same response as a real send.
        logger.info("Password reset requested for unknown email %s", email)
        return sent

    code = generate_otp()
    storage.store_password_reset_otp(email, code)

    if smtp_configured():
        try:
            send_password_reset_email(
                to_email=email, full_name=user.full_name, code=code, ttl_minutes=OTP_TTL_MINUTES
            )
        except Exception as e:
            logger.error(f"Failed to send password reset email to {email}: {e}")
            storage.clear_password_reset_otp(email)
            raise HTTPException(status_code=502, detail=get_error_message("otp_send_failed"))
    else:
        # Local development without SMTP: surface the code in the server log.
        logger.warning("SMTP not configured; password reset OTP for %s is %s", email, code)

    return sent


@router.post("/verify-otp")
def verify_otp(payload: VerifyOtpRequest, storage: Storage = Depends(get_storage)):
    email = validate_email(payload.email)
    code = validate_otp_code(payload.otp)
    if not storage.verify_password_reset_otp(email, code):
        raise HTTPException(status_code=400, detail=get_error_message("invalid_otp"))
    return {"message": "OTP verified", "valid": True}


@router.post("/reset-password")
def reset_password(payload: ResetPasswordRequest, storage: Storage = Depends(get_storage)):
    email = validate_email(payload.email)
    code = validate_otp_code(payload.otp)
    validate_password(payload.new_password)

    if not storage.verify_password_reset_otp(email, code):
        raise HTTPException(status_code=400, detail=get_error_message("invalid_otp"))

    # UserNotFoundError propagates to the app-level handler (404).
    storage.update_user_password(email, payload.new_password)
    storage.clear_password_reset_otp(email)
    logger.info("Password reset completed for %s", email)
    return {"message": "Password reset successfully"}
