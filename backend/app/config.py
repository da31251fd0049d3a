import os
from dotenv import load_dotenv

# Override=True so changes in backend/.env take effect on process reload (and not get
# stuck on old environment variables).
#
# For automated tests, set DISABLE_DOTENV=1 to keep a developer's .env from leaking in.
if os.getenv("DISABLE_DOTENV") != "1":
    load_dotenv(override=True)


def _env_bool(name: str, default: str = "1") -> bool:
    v = (os.getenv(name, default) or default).strip().lower()
    return v in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    return int(raw) if raw else default


# -------------------- Storage --------------------
# Empty DATABASE_URL keeps everything in memory (sample-data mode).
DATABASE_URL = (os.getenv("DATABASE_URL") or "").strip()
# "memory" | "sql"; empty picks sql when DATABASE_URL is set.
STORAGE_BACKEND = (os.getenv("STORAGE_BACKEND") or "").strip().lower()
SEED_SAMPLE_DATA = _env_bool("SEED_SAMPLE_DATA", "1")

# -------------------- Auth --------------------
# NOTE: keep a default for local dev so the server can boot even if SECRET_KEY isn't set.
SECRET_KEY = os.getenv("SECRET_KEY", "dev_secret_change_me")
ACCESS_TOKEN_EXPIRE_MINUTES = _env_int("ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 24 * 7)
BCRYPT_ROUNDS = _env_int("BCRYPT_ROUNDS", 10)

# Password reset codes live this long after being issued.
OTP_TTL_MINUTES = _env_int("OTP_TTL_MINUTES", 5)

# -------------------- Email (password reset) --------------------
SMTP_HOST = (os.getenv("SMTP_HOST") or "").strip()
SMTP_PORT = _env_int("SMTP_PORT", 587)
SMTP_USER = (os.getenv("SMTP_USER") or "").strip()
SMTP_PASS = (os.getenv("SMTP_PASS") or "").strip()
SMTP_FROM = (os.getenv("SMTP_FROM") or SMTP_USER).strip()
SMTP_TLS = _env_bool("SMTP_TLS", "1")

# -------------------- HTTP --------------------
FRONTEND_ORIGINS = [
    origin.strip()
    for origin in os.getenv("FRONTEND_ORIGINS", "").split(",")
    if origin.strip()
]
LOG_LEVEL = (os.getenv("LOG_LEVEL") or "INFO").strip().upper()
