"""HTTP client for the tax service REST API (version 1.0)."""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Self

import httpx
from pydantic import ValidationError
from pydantic_core import PydanticSerializationError

from core.config import TaxServiceSettings, get_settings
from core.logging import get_logger
from core.result import Failure, Result, failure, success
from services.tax_service.errors import (
    InvalidUrlError,
    NetworkError,
    NotConfiguredError,
    ParseError,
    RequestTimeoutError,
    SerializationError,
    TaxServiceClientError,
)
from services.tax_service.models import (
    Address,
    CancelRequest,
    CancelResult,
    GeoTaxResult,
    TaxRequest,
    TaxResult,
    ValidateResult,
    WireModel,
)

if TYPE_CHECKING:
    from types import TracebackType

logger = get_logger(__name__)

# API endpoints, relative to the configured base URL
VALIDATE_ADDRESS_PATH = "/1.0/address/validate"
GET_TAX_PATH = "/1.0/tax/get"
CANCEL_TAX_PATH = "/1.0/tax/cancel"
ESTIMATE_TAX_PATH = "/1.0/tax/{latitude},{longitude}/get"

JSON_CONTENT_TYPE = "application/json"


def _fixed_point(value: float | Decimal) -> str:
    """Render a number in plain decimal notation, never with an exponent."""
    return format(Decimal(str(value)), "f")


class TaxServiceClient:
    """
    Synchronous client for the tax service REST API.

    Builds requests for address validation, tax computation, cancellation
    and geo-based estimation, and decodes every response into its typed
    result. Each operation returns a Result: Success with the decoded
    payload, or Failure with a TaxServiceClientError.

    Responses are decoded whatever their HTTP status, because the API
    reports errors in the same envelope it uses for successes; the
    ``result_code`` of the decoded result tells them apart.

    The client keeps no per-call state and may be shared between threads.

    Attributes:
        settings: Configuration the client was built from.
    """

    def __init__(
        self,
        settings: TaxServiceSettings | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize the tax service client.

        Args:
            settings: Tax service settings (defaults to the application settings).
            transport: Transport to send requests through (tests pass
                ``httpx.MockTransport``); the default opens real connections.
        """
        self.settings = settings if settings is not None else get_settings().tax_service
        self._base_url = (self.settings.url or "").rstrip("/")
        self._client = self._build_client(transport)

    def _build_client(self, transport: httpx.BaseTransport | None) -> httpx.Client:
        """Create the HTTP transport from settings."""
        settings = self.settings
        auth: tuple[str, str] | None = None
        if settings.account_number and settings.license_key is not None:
            auth = (settings.account_number, settings.license_key.get_secret_value())

        return httpx.Client(
            auth=auth,
            proxy=settings.proxy_url,
            verify=settings.strict_ssl,
            timeout=httpx.Timeout(
                settings.read_timeout_seconds,
                connect=settings.connect_timeout_seconds,
            ),
            headers={"Accept": JSON_CONTENT_TYPE},
            transport=transport,
        )

    def close(self) -> None:
        """Close the HTTP transport."""
        if not self._client.is_closed:
            self._client.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def company_code(self) -> str | None:
        """Company code that scopes every document."""
        return self.settings.company_code

    def should_commit_documents(self) -> bool:
        """Whether computed tax documents should be committed."""
        return self.settings.commit_documents

    def is_configured(self) -> bool:
        """Check if the base URL and credentials are all present."""
        return self.settings.is_configured

    def validate_address(self, address: Address) -> Result[ValidateResult, TaxServiceClientError]:
        """
        Validate and normalize a postal address.

        Args:
            address: Address to validate. Absent fields are not sent.

        Returns:
            Result containing ValidateResult or TaxServiceClientError.
        """
        params = {
            "Line1": address.line1,
            "Line2": address.line2,
            "Line3": address.line3,
            "City": address.city,
            "Region": address.region,
            "PostalCode": address.postal_code,
            "Country": address.country,
        }
        return self._execute(
            "GET",
            VALIDATE_ADDRESS_PATH,
            ValidateResult,
            params={name: value for name, value in params.items() if value is not None},
        )

    def get_tax(self, tax_request: TaxRequest) -> Result[TaxResult, TaxServiceClientError]:
        """
        Compute tax for a transaction.

        Args:
            tax_request: The transaction to compute tax for.

        Returns:
            Result containing TaxResult or TaxServiceClientError.
        """
        return self._execute("POST", GET_TAX_PATH, TaxResult, body=tax_request)

    def cancel_tax(
        self, cancel_request: CancelRequest
    ) -> Result[CancelResult, TaxServiceClientError]:
        """
        Cancel a previously computed tax document.

        The service answers 200 even when the document could not be
        cancelled. Check ``result_code`` on the returned CancelResult.

        Args:
            cancel_request: Reference to the document to cancel.

        Returns:
            Result containing CancelResult or TaxServiceClientError.
        """
        return self._execute("POST", CANCEL_TAX_PATH, CancelResult, body=cancel_request)

    def estimate_tax(
        self,
        latitude: float,
        longitude: float,
        sale_amount: float | Decimal,
    ) -> Result[GeoTaxResult, TaxServiceClientError]:
        """
        Estimate tax for a sale at a location.

        Args:
            latitude: Latitude of the point of sale.
            longitude: Longitude of the point of sale.
            sale_amount: Amount of the sale.

        Returns:
            Result containing GeoTaxResult or TaxServiceClientError.
        """
        return self._execute(
            "GET",
            ESTIMATE_TAX_PATH.format(
                latitude=_fixed_point(latitude),
                longitude=_fixed_point(longitude),
            ),
            GeoTaxResult,
            params={"saleamount": _fixed_point(sale_amount)},
        )

    def _execute[T: WireModel](
        self,
        method: str,
        path: str,
        result_type: type[T],
        *,
        params: dict[str, str] | None = None,
        body: WireModel | None = None,
    ) -> Result[T, TaxServiceClientError]:
        """
        Send a request and decode the response into ``result_type``.

        All failures come back as a Failure wrapping the original exception.
        """
        if not self.is_configured():
            logger.error("Tax service is not configured", path=path)
            return failure(NotConfiguredError())

        headers: dict[str, str] = {}
        content: str | None = None
        if body is not None:
            serialized = self._serialize(body)
            if isinstance(serialized, Failure):
                return failure(serialized.error)
            content = serialized.value
            headers["Content-Type"] = JSON_CONTENT_TYPE

        url = f"{self._base_url}{path}"
        logger.debug("Calling tax service", method=method, url=url, params=params)

        try:
            response = self._client.request(
                method,
                url,
                params=params,
                content=content,
                headers=headers,
            )
        except httpx.TimeoutException as e:
            logger.error("Tax service request timeout", method=method, path=path, error=str(e))
            return failure(RequestTimeoutError(e))
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as e:
            logger.error("Invalid tax service URL", url=url, error=str(e))
            return failure(InvalidUrlError(e))
        except httpx.RequestError as e:
            logger.error("Tax service request error", method=method, path=path, error=str(e))
            return failure(NetworkError(e))

        return self._decode(response, result_type)

    def _decode[T: WireModel](
        self, response: httpx.Response, result_type: type[T]
    ) -> Result[T, TaxServiceClientError]:
        """Decode a response body, whatever its status code."""
        if not response.is_success:
            logger.warning(
                "Tax service returned an error status",
                status_code=response.status_code,
                result_type=result_type.__name__,
            )

        try:
            return success(result_type.model_validate_json(response.content))
        except ValidationError as e:
            logger.error(
                "Failed to parse tax service response",
                status_code=response.status_code,
                result_type=result_type.__name__,
                response_text=response.text[:500],
            )
            return failure(ParseError(e, status_code=response.status_code))

    def _serialize(self, body: WireModel) -> Result[str, TaxServiceClientError]:
        """Serialize a request model to its JSON wire form."""
        try:
            return success(body.to_json())
        except (PydanticSerializationError, ValueError, TypeError) as e:
            logger.error("Failed to serialize tax service request", error=str(e))
            return failure(SerializationError(e))
