import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from prometheus_fastapi_instrumentator import Instrumentator

from app.core.config import settings
from app.core.exceptions import DuplicateEmailError, EmployeeNotFoundError, EmployeeServiceError
from app.core.version import get_full_version
from app.api.v1 import api_router
from app.db.session import check_db_connection
from app.core.logging_config import setup_logging, RequestLoggingMiddleware, SERVICE_NAME
from app.core.shutdown import lifespan_manager

setup_logging()
logger = logging.getLogger("employee_directory")


class ErrorResponse(BaseModel):
    """Body of every error response except a missing GET by id."""
    error: str
    detail: str | None = None
    timestamp: str
    path: str | None = None


class HealthResponse(BaseModel):
    status: str
    service: str
    version: str
    environment: str
    checks: dict[str, bool]


# Anything not listed here is a 400
DOMAIN_ERROR_STATUS: dict[type[EmployeeServiceError], int] = {
    DuplicateEmailError: status.HTTP_409_CONFLICT,
    EmployeeNotFoundError: status.HTTP_404_NOT_FOUND,
}


def _error_body(request: Request, error: str, detail: str) -> dict:
    return ErrorResponse(
        error=error,
        detail=detail,
        timestamp=datetime.now(timezone.utc).isoformat(),
        path=request.url.path,
    ).model_dump()


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="CRUD API for employee records",
    version=get_full_version(),
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    lifespan=lifespan_manager,
)


@app.exception_handler(EmployeeServiceError)
async def employee_error_handler(request: Request, exc: EmployeeServiceError) -> JSONResponse:
    """Translate domain rejections into client errors."""
    status_code = DOMAIN_ERROR_STATUS.get(type(exc), status.HTTP_400_BAD_REQUEST)
    logger.warning(f"{request.method} {request.url.path} rejected: {exc.message}")
    return JSONResponse(status_code=status_code, content=_error_body(request, exc.error_code, exc.message))


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Last-resort 500. In production the body carries only a reference ID that
    can be matched against the logged traceback.
    """
    error_id = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S%f")
    logger.error(
        f"Unhandled exception [{error_id}] on {request.method} {request.url.path}: {exc!r}",
        exc_info=exc,
    )

    if settings.IS_PRODUCTION:
        body = _error_body(
            request,
            "Internal server error",
            f"An unexpected error occurred. Reference ID: {error_id}",
        )
    else:
        body = _error_body(request, exc.__class__.__name__, str(exc))
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body)


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

app.include_router(api_router, prefix=settings.API_PREFIX)

# /metrics is only mounted when ENABLE_METRICS=true
Instrumentator(
    should_group_status_codes=False,
    should_ignore_untemplated=True,
    should_respect_env_var=True,
    excluded_handlers=["/health", "/metrics"],
).instrument(app).expose(app, include_in_schema=False)


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Liveness plus a database round trip; 503 when the database is unreachable."""
    db_healthy = await check_db_connection()
    response = HealthResponse(
        status="healthy" if db_healthy else "unhealthy",
        service=SERVICE_NAME,
        version=get_full_version(),
        environment=settings.ENVIRONMENT,
        checks={"database": db_healthy},
    )

    if not db_healthy:
        logger.warning("Health check failed: database unreachable")
        return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=response.model_dump())
    return response


@app.get("/")
async def root():
    return {"message": f"Welcome to {settings.PROJECT_NAME}"}
