"""Main FastAPI application for JusAI.

Entry point for the application. Configures:
- FastAPI app with settings
- CORS middleware
- Request ID middleware
- Exception handlers
- Route registration
"""

import logging
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import get_app_config, get_cors_config, get_settings, setup_logging
from dependencies import get_completion_gateway
from llm import ConfigurationError
from responses import ResponseCode, error_dict, with_request_id
from router import router as api_router

# Setup logging
setup_logging(get_settings().log_level)
logger = logging.getLogger(__name__)


# =============================================================================
# Lifespan Management
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifespan - startup and shutdown."""
    # Startup
    logger.info("Starting JusAI...")

    settings = get_settings()
    logger.info("Environment: %s", settings.environment)
    logger.info("LLM Model: %s", settings.llm_model)
    logger.info("Max upload size: %sMB", settings.max_file_size_mb)

    # Build the shared gateway up front. A missing key is not fatal:
    # chat requests answer 503 and /api/health reports the problem.
    try:
        get_completion_gateway()
        logger.info("✓ Completion gateway initialized")
    except ConfigurationError as e:
        logger.warning("Completion gateway not configured: %s", e)
    except Exception as e:
        logger.error("Completion gateway failed to initialize: %s", e)

    logger.info("JusAI started successfully")

    yield

    # Shutdown
    logger.info("Shutting down JusAI...")
    if get_completion_gateway.cache_info().currsize:
        await get_completion_gateway().close()
        get_completion_gateway.cache_clear()


# Create FastAPI app with lifespan
app_config = get_app_config()
app = FastAPI(lifespan=lifespan, **app_config)

# Add CORS middleware
cors_config = get_cors_config()
app.add_middleware(CORSMiddleware, **cors_config)


# =============================================================================
# Middleware
# =============================================================================


@app.middleware("http")
async def add_request_id(request: Request, call_next):
    """Add request ID to all requests for tracing."""
    request_id = str(uuid.uuid4())[:8]
    request.state.request_id = request_id

    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id

    return response


# =============================================================================
# Exception Handlers
# =============================================================================


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Handle Pydantic validation errors."""
    first_error = exc.errors()[0] if exc.errors() else {}
    field_name = first_error.get("loc", ["unknown"])[-1]

    error_response = error_dict(
        code=ResponseCode.VALIDATION_ERROR,
        custom_message=f"Validation failed for field '{field_name}'",
    )

    return with_request_id(
        JSONResponse(status_code=422, content=error_response), request
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException,
) -> JSONResponse:
    """Handle HTTP exceptions."""
    code_map = {
        404: ResponseCode.NOT_FOUND,
        405: ResponseCode.VALIDATION_ERROR,
        413: ResponseCode.FILE_TOO_LARGE,
    }

    response_code = code_map.get(exc.status_code, ResponseCode.INTERNAL_ERROR)

    error_response = error_dict(
        code=response_code,
        custom_message=str(exc.detail),
    )

    return with_request_id(
        JSONResponse(status_code=exc.status_code, content=error_response), request
    )


@app.exception_handler(Exception)
async def general_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Handle unhandled exceptions without leaking internals."""
    request_id = getattr(request.state, "request_id", None)

    logger.exception("[%s] Unhandled exception: %s", request_id, exc)

    error_response = error_dict(
        code=ResponseCode.INTERNAL_ERROR,
        custom_message="An unexpected error occurred",
    )

    return with_request_id(
        JSONResponse(status_code=500, content=error_response), request
    )


# =============================================================================
# Routes
# =============================================================================

# Include API routes
app.include_router(api_router, prefix="/api")


@app.get("/", include_in_schema=False)
async def root():
    """Root endpoint - shows API info."""
    return {
        "name": "JusAI",
        "description": "Legal document Q&A assistant",
        "docs": "/api/docs",
        "health": "/api/health",
        "chat": "/api/chat",
    }


# =============================================================================
# Development Server
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
