import logging

from ..config import DATABASE_URL, OTP_TTL_MINUTES, SEED_SAMPLE_DATA, STORAGE_BACKEND
from .base import Storage
from .memory import MemoryStorage
from .sql import SqlStorage

logger = logging.getLogger(__name__)


def build_storage(
    backend: str | None = None,
    database_url: str | None = None,
    seed: bool | None = None,
) -> Storage:
    """Build the storage context for this process from config (overridable for tests/scripts)."""
    backend = (backend if backend is not None else STORAGE_BACKEND) or ""
    database_url = database_url if database_url is not None else DATABASE_URL
    seed = SEED_SAMPLE_DATA if seed is None else seed

    if not backend:
        backend = "sql" if database_url else "memory"

    if backend == "memory":
        storage: Storage = MemoryStorage(otp_ttl_minutes=OTP_TTL_MINUTES)
    elif backend == "sql":
        storage = SqlStorage(database_url, otp_ttl_minutes=OTP_TTL_MINUTES)
    else:
        raise ValueError(f"Unknown STORAGE_BACKEND {backend!r} (expected 'memory' or 'sql')")

    logger.info("Using %s storage backend", backend)
    if seed and storage.seed_sample_data():
        logger.info("Seeded sample companies, jobs and courses")
    return storage
