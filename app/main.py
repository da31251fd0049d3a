"""Repo-root Uvicorn entrypoint.

Allows running the backend from the repo root:

    uvicorn app.main:app --reload

This builds the FastAPI app defined in `backend/app/main.py` with storage
chosen from the environment (in-memory sample data when DATABASE_URL is unset).
"""

from backend.app.main import create_default_app

app = create_default_app()
