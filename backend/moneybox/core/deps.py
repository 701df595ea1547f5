"""Dependency injection: services held on app.state, per-IP rate limits."""

import logging

from fastapi import Request, Response

from moneybox.core.errors import RateLimited
from moneybox.services.catalog import CatalogService
from moneybox.services.images import ImageStore

logger = logging.getLogger(__name__)


def get_catalog_service(request: Request) -> CatalogService:
    return request.app.state.catalog_service


def get_image_store(request: Request) -> ImageStore:
    return request.app.state.image_store


def client_key(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def rate_limit(*buckets: str):
    """Dependency factory: counts the request against each named limiter."""

    async def checker(request: Request, response: Response) -> None:
        settings = request.app.state.settings
        if not settings.RATE_LIMIT_ENABLED:
            return
        key = client_key(request)
        for bucket in buckets:
            limiter = request.app.state.limiters[bucket]
            result = limiter.hit(key)
            if not result.allowed:
                logger.warning("Rate limit '%s' exceeded for %s", bucket, key)
                raise RateLimited(
                    "Too many requests, please try again later",
                    retry_after=result.retry_after,
                )
            response.headers["X-RateLimit-Limit"] = str(result.limit)
            response.headers["X-RateLimit-Remaining"] = str(result.remaining)

    return checker
