"""Tax service API client package."""

from services.tax_service.client import TaxServiceClient
from services.tax_service.errors import ErrorCode, TaxServiceClientError
from services.tax_service.models import (
    Address,
    CancelCode,
    CancelRequest,
    CancelResult,
    DetailLevel,
    DocType,
    GeoTaxResult,
    Line,
    Message,
    SeverityLevel,
    TaxOverride,
    TaxOverrideType,
    TaxRequest,
    TaxResult,
    ValidAddress,
    ValidateResult,
)

__all__ = [
    "Address",
    "CancelCode",
    "CancelRequest",
    "CancelResult",
    "DetailLevel",
    "DocType",
    "ErrorCode",
    "GeoTaxResult",
    "Line",
    "Message",
    "SeverityLevel",
    "TaxOverride",
    "TaxOverrideType",
    "TaxRequest",
    "TaxResult",
    "TaxServiceClient",
    "TaxServiceClientError",
    "ValidAddress",
    "ValidateResult",
]
