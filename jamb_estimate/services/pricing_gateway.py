"""Pricing Gateway Client for JAMB Estimate.

Async client for the remote pricing service:
- POST /work/finishing_materials  {work_code} -> {sections: {group: [option]}}
- POST /calculate  {work_code, zipcode, unit_of_measurement, square,
  finishing_materials} -> {work_cost, material_cost, materials}

Service ids travel in dotted form ("1.2.3"); callers pass the hyphenated id.
Transport errors and timeouts are retried with tenacity; HTTP error statuses
are not.
"""

import re
from typing import Any, Dict, List, Optional, Sequence

import httpx
import structlog
from pydantic import ValidationError as PydanticValidationError
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from jamb_estimate.config.errors import (
    ErrorCode,
    PricingGatewayError,
    UnsupportedLocationError,
)
from jamb_estimate.config.settings import settings
from jamb_estimate.models.catalog import ServiceId
from jamb_estimate.models.pricing import (
    CalculationResult,
    FinishingMaterialSet,
    Location,
    PricingRequest,
)

logger = structlog.get_logger(__name__)


# =============================================================================
# Constants
# =============================================================================

FINISHING_MATERIALS_PATH = "/work/finishing_materials"
CALCULATE_PATH = "/calculate"

US_ZIPCODE_PATTERN = re.compile(r"^\d{5}$")

UNSUPPORTED_LOCATION_MESSAGE = "Currently, our service is only available for US ZIP codes (5 digits)."

RETRYABLE_ERRORS = (httpx.TransportError, httpx.TimeoutException)


def validate_location(location: Optional[Location], supported_countries: Sequence[str]) -> None:
    """Check that pricing is offered for a location.

    Raises:
        UnsupportedLocationError: If the country is unsupported or the postal
            code is not a 5-digit ZIP.
    """
    if location is None:
        raise UnsupportedLocationError(UNSUPPORTED_LOCATION_MESSAGE)
    if location.country not in supported_countries or not US_ZIPCODE_PATTERN.match(location.zipcode):
        raise UnsupportedLocationError(
            UNSUPPORTED_LOCATION_MESSAGE,
            zipcode=location.zipcode,
            country=location.country,
        )


class PricingGatewayClient:
    """Client for the remote pricing / finishing-material service."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        max_attempts: Optional[int] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        supported_countries: Optional[Sequence[str]] = None,
        retry_wait=None,
    ):
        """Initialize PricingGatewayClient.

        Args:
            base_url: Service root. Defaults to settings.pricing_api_base_url.
            timeout: Request timeout in seconds.
            max_attempts: Attempts per call for transport errors.
            http_client: Optional shared AsyncClient (tests inject one built on
                httpx.MockTransport).
            supported_countries: Countries pricing is offered in.
            retry_wait: tenacity wait strategy between attempts.
        """
        self.base_url = (base_url or settings.pricing_api_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.http_timeout_seconds
        self.max_attempts = max_attempts or settings.pricing_max_attempts
        self.supported_countries = list(supported_countries or settings.supported_countries)
        self.retry_wait = retry_wait or wait_exponential(multiplier=1, min=2, max=10)
        self._client = http_client

    @property
    def client(self) -> httpx.AsyncClient:
        """Shared AsyncClient (lazy initialization)."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers={"Accept": "application/json"},
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _post(self, path: str, payload: Dict[str, Any], work_code: str) -> Dict[str, Any]:
        """POST JSON with retry on transport errors.

        Raises:
            PricingGatewayError: On timeout, transport failure, error status or
                a body that is not a JSON object.
        """
        url = f"{self.base_url}{path}"
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.max_attempts),
                wait=self.retry_wait,
                retry=retry_if_exception_type(RETRYABLE_ERRORS),
                reraise=True,
            ):
                with attempt:
                    response = await self.client.post(url, json=payload)
                    response.raise_for_status()
        except httpx.TimeoutException as e:
            raise PricingGatewayError(
                code=ErrorCode.PRICING_TIMEOUT,
                message=f"Pricing service timed out ({path}, work_code={work_code})",
                work_code=work_code,
                details={"error": str(e)},
            )
        except httpx.HTTPStatusError as e:
            raise PricingGatewayError(
                code=ErrorCode.PRICING_REQUEST_FAILED,
                message=f"Pricing service returned {e.response.status_code} ({path}, work_code={work_code})",
                work_code=work_code,
                status_code=e.response.status_code,
            )
        except httpx.HTTPError as e:
            raise PricingGatewayError(
                code=ErrorCode.PRICING_REQUEST_FAILED,
                message=f"Pricing service request failed ({path}, work_code={work_code}): {str(e)}",
                work_code=work_code,
            )

        try:
            data = response.json()
        except ValueError:
            data = None
        if not isinstance(data, dict):
            raise PricingGatewayError(
                code=ErrorCode.PRICING_INVALID_RESPONSE,
                message=f"Pricing service returned a non-object body ({path}, work_code={work_code})",
                work_code=work_code,
                status_code=response.status_code,
            )
        return data

    def _invalid_body(self, path: str, work_code: str, error: PydanticValidationError) -> PricingGatewayError:
        logger.error("pricing_response_invalid", path=path, work_code=work_code, error=str(error))
        return PricingGatewayError(
            code=ErrorCode.PRICING_INVALID_RESPONSE,
            message=f"Pricing service returned an invalid body ({path}, work_code={work_code}): "
            f"{error.error_count()} error(s)",
            work_code=work_code,
        )

    # -------------------------------------------------------------------------
    # Remote operations
    # -------------------------------------------------------------------------

    async def resolve_finishing_materials(self, service_id: str) -> FinishingMaterialSet:
        """Candidate finishing materials of a service, by sub-group."""
        work_code = ServiceId.parse(service_id).dotted
        data = await self._post(FINISHING_MATERIALS_PATH, {"work_code": work_code}, work_code)
        try:
            materials = FinishingMaterialSet.model_validate({"sections": data.get("sections")})
        except PydanticValidationError as e:
            raise self._invalid_body(FINISHING_MATERIALS_PATH, work_code, e)
        logger.debug(
            "finishing_materials_resolved",
            service_id=service_id,
            groups=len(materials.sections),
        )
        return materials

    async def calculate(self, request: PricingRequest) -> CalculationResult:
        """Raw /calculate call for an already-built request."""
        data = await self._post(CALCULATE_PATH, request.to_payload(), request.work_code)
        try:
            return CalculationResult.from_response(data)
        except PydanticValidationError as e:
            raise self._invalid_body(CALCULATE_PATH, request.work_code, e)

    async def price(
        self,
        service_id: str,
        quantity: float,
        unit: str,
        location: Optional[Location],
        finishing_selection: List[str],
    ) -> CalculationResult:
        """Price one service.

        Args:
            service_id: Hyphenated service id.
            quantity: Quantity in the service's unit.
            unit: Unit of measurement.
            location: Where the work happens.
            finishing_selection: External ids of the chosen finishing materials.

        Returns:
            The fetched calculation result.

        Raises:
            UnsupportedLocationError: Before any call, if the location is not
                priceable.
            PricingGatewayError: If the remote call fails.
        """
        validate_location(location, self.supported_countries)

        request = PricingRequest(
            work_code=ServiceId.parse(service_id).dotted,
            zipcode=location.zipcode,
            unit_of_measurement=unit,
            square=quantity,
            finishing_materials=list(finishing_selection),
        )
        result = await self.calculate(request)
        logger.debug(
            "service_priced",
            service_id=service_id,
            quantity=quantity,
            labor_cost=result.labor_cost,
            material_cost=result.material_cost,
        )
        return result
