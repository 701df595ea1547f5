"""HTTP client for the catalog API, one method per endpoint."""

import logging
from typing import Any, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:3002/api"


class ApiError(Exception):
    def __init__(self, status_code: int, message: str, details: Optional[list] = None):
        super().__init__(f"HTTP {status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.details = details or []


class CatalogClient:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10.0,
        http: Optional[httpx.Client] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.http = http or httpx.Client(timeout=timeout)

    def close(self) -> None:
        self.http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def _request(self, method: str, path: str, **kwargs) -> Any:
        r = self.http.request(method, f"{self.base_url}{path}", **kwargs)
        if r.is_error:
            try:
                body = r.json()
            except ValueError:
                body = {"error": r.text or r.reason_phrase}
            logger.error("API Error: %s %s -> %s %s", method, path, r.status_code, body)
            raise ApiError(r.status_code, body.get("error", "Request failed"), body.get("details"))
        if r.status_code == 204 or not r.content:
            return None
        if r.headers.get("content-type", "").startswith("application/json"):
            return r.json()
        return r.content

    # Categories
    def get_categories(self) -> dict:
        return self._request("GET", "/categories")

    def get_category(self, category_id: str) -> dict:
        return self._request("GET", f"/categories/{category_id}")

    def create_category(self, name: str, description: Optional[str] = None) -> dict:
        return self._request("POST", "/categories", json={"name": name, "description": description})

    def update_category(self, category_id: str, name: str, description: Optional[str] = None) -> dict:
        return self._request(
            "PUT", f"/categories/{category_id}", json={"name": name, "description": description}
        )

    def delete_category(self, category_id: str) -> None:
        self._request("DELETE", f"/categories/{category_id}")

    # Products
    def create_product(
        self,
        category_id: str,
        name: str,
        description: Optional[str] = None,
        icon: Optional[str] = None,
    ) -> dict:
        return self._request("POST", "/products", json={
            "categoryId": category_id, "name": name, "description": description, "icon": icon,
        })

    def update_product(
        self,
        product_id: str,
        name: str,
        description: Optional[str] = None,
        icon: Optional[str] = None,
    ) -> dict:
        return self._request("PUT", f"/products/{product_id}", json={
            "name": name, "description": description, "icon": icon,
        })

    def delete_product(self, product_id: str) -> None:
        self._request("DELETE", f"/products/{product_id}")

    def reorder_products(self, category_id: str, product_orders: list[dict]) -> dict:
        return self._request(
            "PUT",
            f"/categories/{category_id}/products/reorder",
            json={"productOrders": product_orders},
        )

    def bulk_operation(self, action: str, product_ids: list[str], data: Optional[dict] = None) -> dict:
        return self._request(
            "POST", "/products/bulk", json={"action": action, "productIds": product_ids, "data": data}
        )

    # Images
    def upload_image(self, image_data: str, name: Optional[str] = None, type: Optional[str] = None) -> dict:
        return self._request(
            "POST", "/images/upload", json={"imageData": image_data, "name": name, "type": type}
        )

    def get_images(self) -> dict:
        return self._request("GET", "/images")

    def get_image(self, filename: str) -> bytes:
        return self._request("GET", f"/images/{filename}")

    def delete_image(self, filename: str) -> None:
        self._request("DELETE", f"/images/{filename}")

    # Health check
    def health_check(self) -> dict:
        return self._request("GET", "/health")
