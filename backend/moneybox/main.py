import logging

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from moneybox import __version__
from moneybox.api import categories, images, products
from moneybox.core.clock import utcnow_iso
from moneybox.core.config import Settings, settings as default_settings
from moneybox.core.deps import rate_limit
from moneybox.core.errors import CatalogError, RateLimited, ValidationFailed
from moneybox.core.logging import configure_logging
from moneybox.core.ratelimit import SlidingWindowLimiter
from moneybox.services.catalog import CatalogService
from moneybox.services.images import ImageStore
from moneybox.storage.json_file import JsonFileStorage

logger = logging.getLogger(__name__)


def _validation_details(exc: RequestValidationError) -> list[dict]:
    details = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        details.append({"field": ".".join(loc) or "body", "message": err.get("msg", "Invalid value")})
    return details


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Validation failed", "details": _validation_details(exc)},
        )

    @app.exception_handler(CatalogError)
    async def catalog_error_handler(request: Request, exc: CatalogError):
        content: dict = {"error": exc.message}
        headers = None
        if isinstance(exc, ValidationFailed) and exc.details:
            content["details"] = exc.details
        if isinstance(exc, RateLimited):
            content["retryAfter"] = exc.retry_after
            headers = {"Retry-After": str(exc.retry_after)}
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc, exc_info=exc)
            content = {"error": "Internal server error"}
        return JSONResponse(status_code=exc.status_code, content=content, headers=headers)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or default_settings
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title="Moneybox Product Explorer API",
        description="Catalog admin backend: categories, products and images",
        version=__version__,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    image_store = ImageStore(settings.UPLOAD_DIR, settings.MAX_UPLOAD_SIZE_MB * 1024 * 1024)
    image_store.ensure_dir()

    app.state.settings = settings
    app.state.catalog_service = CatalogService(JsonFileStorage(settings.DATA_FILE))
    app.state.image_store = image_store
    app.state.limiters = {
        "general": SlidingWindowLimiter(settings.RATE_LIMIT_GENERAL, settings.RATE_LIMIT_WINDOW_SECONDS),
        "write": SlidingWindowLimiter(settings.RATE_LIMIT_WRITE, settings.RATE_LIMIT_WINDOW_SECONDS),
    }

    register_exception_handlers(app)

    # Routers
    app.include_router(categories.router)
    app.include_router(products.router)
    app.include_router(images.router)

    # Serve uploaded images
    app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")

    @app.get("/api/health", dependencies=[Depends(rate_limit("general"))])
    async def health_check():
        return {"status": "OK", "timestamp": utcnow_iso(), "version": __version__}

    logger.info(
        "Catalog API ready: data=%s uploads=%s", settings.DATA_FILE, settings.UPLOAD_DIR
    )
    return app


app = create_app()
