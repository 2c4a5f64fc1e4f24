"""Composite order client for JAMB Estimate.

Async client for the order service (every call is a JSON POST):
- /composite-order/create  {user_token, ...}    -> {order_code}
- /composite-order/get     {token, order_code}  -> CompositeOrder
- /composite-order/list    {token}              -> [CompositeOrder]
- /composite-order/update  {token, order_code, ...} -> CompositeOrder
- /composite-order/delete  {token, order_code}  -> {status}

Non-success responses raise ``OrderServiceError`` with the server's
``error`` message (or its joined ``errors`` list) and the HTTP status.
"""

from typing import Any, Dict, List, Optional, Union

import httpx
import structlog
from pydantic import ValidationError as PydanticValidationError
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from jamb_estimate.config.errors import ErrorCode, OrderServiceError, ValidationError
from jamb_estimate.config.settings import settings
from jamb_estimate.models.composite_order import CompositeOrder, CompositeOrderUpdate

logger = structlog.get_logger(__name__)

RETRYABLE_ERRORS = (httpx.TransportError, httpx.TimeoutException)

DEFAULT_STATUS_MESSAGES = {
    400: "Bad request (400)",
    404: "User or order not found",
    500: "Internal server error (500)",
}


def _error_message(response: httpx.Response) -> str:
    """Server-provided error text, falling back to a per-status default."""
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        errors = body.get("errors")
        if isinstance(errors, list) and errors:
            return ", ".join(str(error) for error in errors)
        if body.get("error"):
            return str(body["error"])
        if isinstance(errors, str) and errors:
            return errors
    return DEFAULT_STATUS_MESSAGES.get(
        response.status_code, f"Request failed with status {response.status_code}"
    )


class CompositeOrderClient:
    """Client for reading and updating persisted composite orders."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        max_attempts: Optional[int] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        retry_wait=None,
    ):
        self.base_url = (base_url or settings.orders_api_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.http_timeout_seconds
        self.max_attempts = max_attempts or settings.pricing_max_attempts
        self.retry_wait = retry_wait or wait_exponential(multiplier=1, min=2, max=10)
        self._client = http_client

    @property
    def client(self) -> httpx.AsyncClient:
        """Shared AsyncClient (lazy initialization)."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _post(self, path: str, payload: Dict[str, Any], order_code: Optional[str] = None) -> Any:
        url = f"{self.base_url}/composite-order/{path}"
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.max_attempts),
                wait=self.retry_wait,
                retry=retry_if_exception_type(RETRYABLE_ERRORS),
                reraise=True,
            ):
                with attempt:
                    response = await self.client.post(url, json=payload)
        except httpx.HTTPError as e:
            logger.error("order_request_failed", path=path, order_code=order_code, error=str(e))
            raise OrderServiceError(
                code=ErrorCode.ORDER_REQUEST_FAILED,
                message=f"Order service request failed: {str(e)}",
                order_code=order_code,
            )

        if response.status_code >= 400:
            message = _error_message(response)
            logger.warning(
                "order_request_rejected",
                path=path,
                order_code=order_code,
                status_code=response.status_code,
                error=message,
            )
            raise OrderServiceError(
                code=ErrorCode.ORDER_NOT_FOUND if response.status_code == 404 else ErrorCode.ORDER_REQUEST_FAILED,
                message=message,
                order_code=order_code,
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError:
            raise OrderServiceError(
                code=ErrorCode.ORDER_INVALID_RESPONSE,
                message="Order service returned a non-JSON body",
                order_code=order_code,
                status_code=response.status_code,
            )

    def _parse_order(self, data: Any, order_code: Optional[str] = None) -> CompositeOrder:
        try:
            return CompositeOrder.model_validate(data)
        except PydanticValidationError as e:
            logger.error("order_parse_failed", order_code=order_code, error=str(e))
            raise OrderServiceError(
                code=ErrorCode.ORDER_INVALID_RESPONSE,
                message=f"Order service returned an invalid order: {e.error_count()} error(s)",
                order_code=order_code,
            )

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    async def create_order(self, body: Dict[str, Any]) -> str:
        """Create an order from a checkout body. Returns the new order code."""
        data = await self._post("create", body)
        order_code = data.get("order_code", "") if isinstance(data, dict) else ""
        logger.info("order_created", order_code=order_code, works=len(body.get("works", [])))
        return order_code

    async def get_order(self, token: str, order_code: str) -> CompositeOrder:
        data = await self._post("get", {"token": token, "order_code": order_code}, order_code)
        return self._parse_order(data, order_code)

    async def list_orders(self, token: str) -> List[CompositeOrder]:
        data = await self._post("list", {"token": token})
        if not isinstance(data, list):
            raise OrderServiceError(
                code=ErrorCode.ORDER_INVALID_RESPONSE,
                message="Order service returned a non-list body for list",
            )
        return [self._parse_order(item) for item in data]

    async def update_order(self, payload: Union[CompositeOrderUpdate, Dict[str, Any]]) -> CompositeOrder:
        """Submit an update; the payload shape is owned by the order service."""
        if not isinstance(payload, CompositeOrderUpdate):
            try:
                payload = CompositeOrderUpdate.model_validate(payload)
            except PydanticValidationError as e:
                fields = [".".join(str(part) for part in error["loc"]) for error in e.errors()]
                raise ValidationError(
                    f"Invalid order update: {e.error_count()} error(s)",
                    details={"fields": fields},
                )
        data = await self._post("update", payload.to_payload(), payload.order_code)
        logger.info("order_updated", order_code=payload.order_code)
        return self._parse_order(data, payload.order_code)

    async def delete_order(self, token: str, order_code: str) -> Dict[str, Any]:
        data = await self._post("delete", {"token": token, "order_code": order_code}, order_code)
        logger.info("order_deleted", order_code=order_code)
        return data if isinstance(data, dict) else {"status": str(data)}
