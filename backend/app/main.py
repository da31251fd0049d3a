import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from .api import applications as applications_api
from .api import auth as auth_api
from .api import companies as companies_api
from .api import contact as contact_api
from .api import courses as courses_api
from .api import job as job_api
from .config import FRONTEND_ORIGINS, LOG_LEVEL
from .storage.base import Storage
from .storage.factory import build_storage
from .utils.error_handlers import AppError, create_error_response, get_error_message

logger = logging.getLogger(__name__)


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        """Storage and domain errors carry their own status code."""
        if exc.status_code >= 500:
            logger.error("AppError on %s: %s %s", request.url.path, exc.message, exc.details)
        return create_error_response(exc.status_code, exc.message, exc.details)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        """Handle HTTPException with user-friendly messages."""
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "success": False,
                "error": exc.detail,
                "status_code": exc.status_code,
            },
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=422,
            content={
                "success": False,
                "error": get_error_message("validation_error"),
                "details": jsonable_encoder(exc.errors()),
            },
        )

    @app.exception_handler(OperationalError)
    async def sqlalchemy_operational_error_handler(request: Request, exc: OperationalError):
        """Handle database operational errors."""
        logger.exception("Database OperationalError: %s", exc)
        return create_error_response(503, get_error_message("database_error"))

    @app.exception_handler(SQLAlchemyError)
    async def sqlalchemy_error_handler(request: Request, exc: SQLAlchemyError):
        """Handle general database errors."""
        logger.exception("Database SQLAlchemyError: %s", exc)
        return create_error_response(500, get_error_message("database_error"))

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        """Handle ValueError with user-friendly message."""
        logger.warning("ValueError: %s", exc)
        return create_error_response(400, str(exc) or get_error_message("validation_error"))

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle unexpected errors globally."""
        logger.exception("Unhandled exception: %s", exc)
        return create_error_response(500, get_error_message("server_error"))


def create_app(storage: Storage | None = None) -> FastAPI:
    """
    Build the API around one storage context.

    Tests pass their own storage; the server builds one from config.
    """
    app = FastAPI(title="JobPortal API")
    app.state.storage = storage if storage is not None else build_storage()

    app.include_router(auth_api.router)
    app.include_router(companies_api.router)
    app.include_router(job_api.router)
    app.include_router(applications_api.router)
    app.include_router(courses_api.router)
    app.include_router(contact_api.router)

    _register_exception_handlers(app)

    @app.get("/health")
    @app.get("/api/health")
    def health_check():
        """Health check endpoint."""
        return {
            "status": "Backend running",
            "service": "JobPortal API",
            "storage": type(app.state.storage).__name__,
        }

    _default_origins = ["http://localhost:5173", "http://127.0.0.1:5173"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[*_default_origins, *FRONTEND_ORIGINS],
        allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$",
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    return app


def create_default_app() -> FastAPI:
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return create_app()
