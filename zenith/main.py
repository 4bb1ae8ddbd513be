import logging

from fastapi import Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from zenith.api.deps import get_optional_actor
from zenith.api.router import api_router
from zenith.core.config import settings
from zenith.core.exceptions import ZenithError
from zenith.schemas.base import ErrorDetail, ErrorResponse
from zenith.services.scheduler import start_cleanup_scheduler, stop_cleanup_scheduler
from zenith.utils.logger import api_logger

logger = logging.getLogger(__name__)

HTTP_ERROR_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
}

app = FastAPI(
    title=settings.PROJECT_NAME,
    description=settings.PROJECT_DESCRIPTION,
    version=settings.VERSION,
    openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
    docs_url=f"{settings.API_V1_PREFIX}/docs",
    redoc_url=f"{settings.API_V1_PREFIX}/redoc",
    redirect_slashes=False,
)


# Custom OpenAPI schema with explicit security scheme
def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema

    openapi_schema = get_openapi(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description=settings.PROJECT_DESCRIPTION,
        routes=app.routes,
    )

    openapi_schema.setdefault("components", {})["securitySchemes"] = {
        "OAuth2PasswordBearer": {
            "type": "oauth2",
            "flows": {
                "password": {
                    "tokenUrl": f"{settings.API_V1_PREFIX}/auth/token",
                    "scopes": {}
                }
            }
        }
    }

    app.openapi_schema = openapi_schema
    return app.openapi_schema


app.openapi = custom_openapi

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def error_response(status_code: int, code: str, message: str, details=None, headers=None) -> JSONResponse:
    body = ErrorResponse(status=status_code, error=ErrorDetail(code=code, message=message, details=details or {}))
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body), headers=headers)


@app.exception_handler(ZenithError)
async def zenith_error_handler(request: Request, exc: ZenithError):
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    if exc.status_code >= 500:
        api_logger.error(exc.message, "ERROR", path=request.url.path)
    else:
        api_logger.warning(exc.message, "ERROR", path=request.url.path, status=exc.status_code)
    return error_response(exc.status_code, exc.code, exc.message, exc.details, headers)


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"field": ".".join(str(part) for part in error.get("loc", ())), "message": error.get("msg", "")}
        for error in exc.errors()
    ]
    api_logger.warning("Request validation failed", "ERROR", path=request.url.path, errors=errors)
    return error_response(400, "VALIDATION_ERROR", "Request validation failed", {"errors": errors})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    code = HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR")
    return error_response(exc.status_code, code, str(exc.detail), headers=getattr(exc, "headers", None))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return error_response(500, "INTERNAL_ERROR", "An unexpected error occurred")


# Every request under the API prefix has its bearer token checked, public
# routes included; a bad token is rejected before any handler runs.
app.include_router(api_router, prefix=settings.API_V1_PREFIX, dependencies=[Depends(get_optional_actor)])


@app.on_event("startup")
async def startup_event():
    """Initialize services on application startup."""
    try:
        logger.info("Starting up Zenith API...")

        if settings.CLEANUP_ENABLED:
            await start_cleanup_scheduler()
            logger.info("Cleanup scheduler started")
        else:
            logger.info("Cleanup scheduler disabled")

        logger.info("Zenith API startup completed successfully")

    except Exception as e:
        logger.error(f"Failed to start up application: {e}")
        raise


@app.on_event("shutdown")
async def shutdown_event():
    """Clean up services on application shutdown."""
    try:
        await stop_cleanup_scheduler()
        logger.info("Zenith API shutdown completed successfully")

    except Exception as e:
        logger.error(f"Error during application shutdown: {e}")


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "message": "Welcome to Zenith API"}
