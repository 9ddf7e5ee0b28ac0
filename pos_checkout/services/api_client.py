"""
POS API Client

HTTP client for the backend that owns the catalog and orders.
Implements both the catalog read and the order service contracts.
"""

import logging
from typing import Any, Optional

import httpx
import pydantic

from ..core.errors import MalformedProduct, NetworkError, NotFoundError, ServerRejection
from ..models.checkout import Order, OrderRequest, OrderStatus
from ..models.product import Product, ProductPage

logger = logging.getLogger(__name__)


class PosApiClient:
    """
    Client for the POS backend REST API.

    Responses are wrapped in a ``{success, message, data}`` envelope. Requests
    are never retried automatically; retries are always an explicit user
    action.
    """

    def __init__(
        self,
        base_url: str,
        api_token: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize API client.

        Args:
            base_url: Base URL of the backend API, e.g. ``http://host/api``
            api_token: Bearer token sent with every request
            timeout: Request timeout in seconds
            transport: Optional transport override (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self._api_token = api_token
        self._http_client = httpx.AsyncClient(timeout=timeout, transport=transport)

        if not api_token:
            logger.warning("No API token configured - requests will be anonymous")

    async def close(self) -> None:
        """Close HTTP client"""
        await self._http_client.aclose()

    def _generate_headers(self, extra: Optional[dict[str, str]] = None) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if self._api_token:
            headers["Authorization"] = f"Bearer {self._api_token}"
        if extra:
            headers.update(extra)
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        body: Optional[dict] = None,
        params: Optional[dict] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> Any:
        """Make an HTTP request and unwrap the response envelope"""
        url = f"{self.base_url}{path}"

        try:
            response = await self._http_client.request(
                method=method,
                url=url,
                headers=self._generate_headers(headers),
                json=body,
                params=params,
            )
        except httpx.TimeoutException as e:
            logger.error(f"Request timed out: {method} {url}")
            raise NetworkError(f"Order service timed out: {e}") from e
        except httpx.TransportError as e:
            logger.error(f"Request failed: {method} {url} - {e}")
            raise NetworkError(f"Could not reach the order service: {e}") from e

        payload = _json_or_none(response)
        message = _message(payload) or response.reason_phrase

        if response.status_code == 404:
            logger.error(f"Not found: {method} {url} - {message}")
            raise NotFoundError(message)

        if response.status_code >= 400:
            logger.error(f"Request failed: {response.status_code} - {message}")
            raise ServerRejection(message, status_code=response.status_code)

        if not isinstance(payload, dict):
            raise ServerRejection("Order service returned an invalid response", status_code=502)

        if payload.get("success") is False:
            logger.error(f"Request rejected: {method} {url} - {message}")
            raise ServerRejection(message)

        return payload.get("data", payload)

    # ==================== Catalog ====================

    async def get_product(self, product_id: str) -> Product:
        """Get product details"""
        data = await self._request("GET", f"/products/{product_id}")
        record = data.get("product", data) if isinstance(data, dict) else data
        return _parse_product(record)

    async def list_products(
        self,
        search: Optional[str] = None,
        category_id: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> ProductPage:
        """List active products in the catalog"""
        params: dict[str, Any] = {"page": page, "limit": limit}
        if search:
            params["search"] = search
        if category_id:
            params["categoryId"] = category_id

        data = await self._request("GET", "/products", params=params)
        records = data.get("products", []) if isinstance(data, dict) else data
        products = [_parse_product(record) for record in records]

        pagination = data.get("pagination", {}) if isinstance(data, dict) else {}
        return ProductPage(
            products=products,
            total=pagination.get("total", len(products)),
            page=pagination.get("page", page),
            limit=pagination.get("limit", limit),
        )

    # ==================== Orders ====================

    async def create_order(self, request: OrderRequest) -> Order:
        """
        Submit an order request.

        The request id travels as an idempotency key so the backend can
        detect duplicates; the client itself never resubmits.
        """
        data = await self._request(
            "POST",
            "/orders",
            body=request.to_payload(),
            headers={"Idempotency-Key": request.request_id},
        )
        return _parse_order(data)

    async def get_order(self, order_id: str) -> Order:
        """Get order details"""
        data = await self._request("GET", f"/orders/{order_id}")
        return _parse_order(data)

    async def update_status(self, order_id: str, status: OrderStatus) -> Order:
        """Ask the backend to move an order to a new status"""
        data = await self._request(
            "POST",
            f"/orders/{order_id}/status",
            body={"status": OrderStatus(status).value},
        )
        return _parse_order(data)


def _json_or_none(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def _message(payload: Any) -> Optional[str]:
    if isinstance(payload, dict):
        return payload.get("message") or payload.get("error")
    return None


def _parse_product(record: Any) -> Product:
    try:
        return Product.model_validate(record)
    except pydantic.ValidationError as e:
        logger.error(f"Malformed product record: {e}")
        raise MalformedProduct(f"Malformed product record: {e.error_count()} invalid field(s)") from e


def _parse_order(data: Any) -> Order:
    record = data.get("order", data) if isinstance(data, dict) else data
    try:
        return Order.model_validate(record)
    except pydantic.ValidationError as e:
        logger.error(f"Malformed order record: {e}")
        raise ServerRejection("Order service returned a malformed order", status_code=502) from e
