"""
Centralized error handling and user-friendly error messages.
"""
from fastapi.responses import JSONResponse


class AppError(Exception):
    """Base application error."""
    def __init__(self, message: str, status_code: int = 500, details: dict | None = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(AppError):
    """Validation error."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, status_code=400, details=details)


class NotFoundError(AppError):
    """Resource not found error."""
    def __init__(self, message: str = "Resource not found", details: dict | None = None):
        super().__init__(message, status_code=404, details=details)


class DatabaseError(AppError):
    """Database error."""
    def __init__(self, message: str = "Database operation failed", details: dict | None = None):
        super().__init__(message, status_code=500, details=details)


# -------------------- Storage errors --------------------

class DuplicateEmailError(AppError):
    """An account with this email already exists."""
    def __init__(self, email: str):
        super().__init__(get_error_message("email_exists"), status_code=409, details={"email": email})


class UnknownCompanyError(ValidationError):
    """A job referenced a company id that does not exist."""
    def __init__(self, company_id: str):
        super().__init__(get_error_message("unknown_company"), details={"company_id": company_id})


class JobNotFoundError(NotFoundError):
    """An application referenced a job id that does not exist."""
    def __init__(self, job_id: str):
        super().__init__(get_error_message("job_not_found"), details={"job_id": job_id})


class UserNotFoundError(NotFoundError):
    """No account is registered under this email (or id)."""
    def __init__(self, email: str | None = None, *, user_id: str | None = None):
        details = {"email": email} if email is not None else {"user_id": user_id}
        super().__init__(get_error_message("user_not_found"), details=details)


class StorageIntegrityError(DatabaseError):
    """A stored record points at a parent that no longer exists."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, details=details)


# User-friendly error messages
ERROR_MESSAGES = {
    # Authentication
    "invalid_credentials": "Invalid email or password. Please try again.",
    "email_exists": "An account with this email already exists. Please login instead.",
    "weak_password": "Password must be at least 6 characters long.",
    "session_expired": "Your session has expired. Please login again.",
    "user_not_found": "No account found with this email.",
    "invalid_otp": "Invalid or expired OTP. Please request a new one.",
    "otp_send_failed": "Could not send the OTP email. Please try again later.",

    # Companies
    "company_not_found": "Company not found.",
    "unknown_company": "The selected company does not exist.",

    # Jobs
    "job_not_found": "Job posting not found or has been removed.",
    "job_closed": "This job posting is no longer accepting applications.",

    # Applications
    "application_not_found": "Application not found. It may have been withdrawn.",

    # Courses
    "course_not_found": "Course not found.",

    # General
    "unauthorized": "Please login to access this feature.",
    "not_found": "The requested resource was not found.",
    "server_error": "Something went wrong on our end. Please try again later.",
    "database_error": "Database connection issue. Please try again later.",
    "validation_error": "Please check your input and try again.",
}


def get_error_message(error_key: str, default: str | None = None) -> str:
    """Get a user-friendly error message."""
    return ERROR_MESSAGES.get(error_key, default or ERROR_MESSAGES["server_error"])


def create_error_response(
    status_code: int,
    message: str,
    details: dict | None = None
) -> JSONResponse:
    """Create a standardized error response."""
    content = {
        "success": False,
        "error": message,
    }

    if details:
        content["details"] = details

    return JSONResponse(
        status_code=status_code,
        content=content
    )
