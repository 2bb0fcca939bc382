"""
Wire models for the tax service REST API.

Attribute names are snake_case in Python and PascalCase on the wire
(``postal_code`` <-> ``PostalCode``). Models are immutable and ignore
unknown fields. JSON ``null`` is treated as an absent field.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, PlainSerializer, model_validator
from pydantic.alias_generators import to_pascal


def _without_nulls(data: Any) -> Any:
    if isinstance(data, dict):
        return {key: value for key, value in data.items() if value is not None}
    return data


def _to_calendar_date(value: Any) -> Any:
    """Drop the time of day from datetimes and timestamp strings."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and "T" in value:
        return value.split("T", 1)[0]
    return value


CalendarDate = Annotated[
    date,
    BeforeValidator(_to_calendar_date),
    PlainSerializer(lambda d: d.isoformat(), return_type=str, when_used="json"),
]


def _to_json_number(amount: Decimal) -> int | float:
    """
    Convert an amount to a JSON number without losing digits.

    Whole amounts become ints, which JSON carries exactly at any size.
    Fractional amounts become floats only when the float reads back as
    the same decimal; anything else is refused rather than rounded.
    """
    if not amount.is_finite():
        msg = f"Amount {amount} is not a finite number"
        raise ValueError(msg)
    if amount == amount.to_integral_value():
        return int(amount)
    number = float(amount)
    if Decimal(repr(number)) != amount:
        msg = f"Amount {amount} cannot be sent as a JSON number without losing precision"
        raise ValueError(msg)
    return number


# Monetary amounts go out as JSON numbers, not strings
Amount = Annotated[
    Decimal,
    PlainSerializer(_to_json_number, return_type=int | float, when_used="json"),
]


class SeverityLevel(str, Enum):
    """Result code carried by every API response."""

    SUCCESS = "Success"
    WARNING = "Warning"
    ERROR = "Error"
    EXCEPTION = "Exception"


class DocType(str, Enum):
    """Kind of tax document."""

    SALES_ORDER = "SalesOrder"
    SALES_INVOICE = "SalesInvoice"
    RETURN_ORDER = "ReturnOrder"
    RETURN_INVOICE = "ReturnInvoice"
    PURCHASE_ORDER = "PurchaseOrder"
    PURCHASE_INVOICE = "PurchaseInvoice"


class DetailLevel(str, Enum):
    """How much detail the tax computation returns."""

    SUMMARY = "Summary"
    DOCUMENT = "Document"
    LINE = "Line"
    TAX = "Tax"
    DIAGNOSTIC = "Diagnostic"


class CancelCode(str, Enum):
    """Reason for cancelling a tax document."""

    UNSPECIFIED = "Unspecified"
    POST_FAILED = "PostFailed"
    DOC_DELETED = "DocDeleted"
    DOC_VOIDED = "DocVoided"
    ADJUSTMENT_CANCELLED = "AdjustmentCancelled"


class TaxOverrideType(str, Enum):
    """Kind of tax override applied to a document or line."""

    NONE = "None"
    TAX_AMOUNT = "TaxAmount"
    EXEMPTION = "Exemption"
    TAX_DATE = "TaxDate"


class WireModel(BaseModel):
    """Base for all request and result models."""

    model_config = ConfigDict(
        alias_generator=to_pascal,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        """Let defaults apply to fields sent as null."""
        return _without_nulls(data)

    def to_json(self) -> str:
        """Serialize with wire names, leaving out absent fields."""
        return self.model_dump_json(by_alias=True, exclude_none=True)


# Requests


class Address(WireModel):
    """Postal address, used both for validation and as a document address."""

    address_code: str | None = None
    line1: str | None = None
    line2: str | None = None
    line3: str | None = None
    city: str | None = None
    region: str | None = None
    postal_code: str | None = None
    country: str | None = None
    tax_region_id: int | None = None
    latitude: float | None = None
    longitude: float | None = None


class TaxOverride(WireModel):
    """Override of the computed tax for a document or a line."""

    tax_override_type: TaxOverrideType | None = None
    reason: str | None = None
    tax_amount: Amount | None = None
    tax_date: CalendarDate | None = None


class Line(WireModel):
    """
    One line item of a tax request.

    Attributes:
        line_no: Line identifier, unique within the document.
        destination_code: Address code of the destination address.
        origin_code: Address code of the origin address.
        item_code: Item (SKU) code.
        tax_code: Tax code of the item.
        qty: Quantity.
        amount: Total amount of the line (extended, not unit price).
        discounted: Whether the document discount applies to this line.
        tax_included: Whether the amount already includes tax.
    """

    line_no: str | None = None
    destination_code: str | None = None
    origin_code: str | None = None
    item_code: str | None = None
    tax_code: str | None = None
    customer_usage_type: str | None = None
    description: str | None = None
    qty: Amount | None = None
    amount: Amount | None = None
    discounted: bool | None = None
    tax_included: bool | None = None
    ref1: str | None = None
    ref2: str | None = None
    business_identification_no: str | None = None
    tax_override: TaxOverride | None = None


class TaxRequest(WireModel):
    """
    A transaction needing a tax computation.

    Every field is copied to the wire as given; nothing is defaulted.
    ``company_code`` and ``commit`` are usually taken from the client's
    ``company_code`` and ``should_commit_documents()``.
    """

    customer_code: str | None = None
    doc_date: CalendarDate | None = None
    company_code: str | None = None
    client: str | None = None
    doc_code: str | None = None
    detail_level: DetailLevel | None = None
    commit: bool | None = None
    doc_type: DocType | None = None
    customer_usage_type: str | None = None
    exemption_no: str | None = None
    discount: Amount | None = None
    tax_override: TaxOverride | None = None
    business_identification_no: str | None = None
    origin_code: str | None = None
    destination_code: str | None = None
    addresses: tuple[Address, ...] = ()
    lines: tuple[Line, ...] = ()
    reference_code: str | None = None
    pos_lane_code: str | None = None
    currency_code: str | None = None
    purchase_order_no: str | None = None
    payment_date: CalendarDate | None = None
    exchange_rate: Amount | None = None
    exchange_rate_eff_date: CalendarDate | None = None
    location_code: str | None = None


class CancelRequest(WireModel):
    """Reference to a previously computed tax document to cancel."""

    company_code: str | None = None
    doc_type: DocType | None = None
    doc_code: str | None = None
    cancel_code: CancelCode | None = None
    doc_id: str | None = None


# Results


class Message(WireModel):
    """Informational, warning or error message attached to a result."""

    summary: str | None = None
    details: str | None = None
    refers_to: str | None = None
    severity: SeverityLevel | None = None
    source: str | None = None


class ValidAddress(Address):
    """Address as corrected by the validation endpoint."""

    address_type: str | None = None
    county: str | None = None
    fips_code: str | None = None
    carrier_route: str | None = None
    post_net: str | None = None


class ValidateResult(WireModel):
    """Result of an address validation."""

    address: ValidAddress | None = None
    result_code: SeverityLevel
    messages: tuple[Message, ...] = ()


class TaxDetail(WireModel):
    """Tax computed for a single jurisdiction."""

    rate: float | None = None
    tax: Amount | None = None
    taxable: Amount | None = None
    tax_calculated: Amount | None = None
    country: str | None = None
    region: str | None = None
    juris_type: str | None = None
    juris_name: str | None = None
    juris_code: str | None = None
    tax_name: str | None = None


class TaxLine(WireModel):
    """Tax computed for one request line."""

    line_no: str | None = None
    tax_code: str | None = None
    taxability: bool | None = None
    taxable: Amount | None = None
    rate: float | None = None
    tax: Amount | None = None
    discount: Amount | None = None
    tax_calculated: Amount | None = None
    exemption: Amount | None = None
    boundary_level: str | None = None
    tax_details: tuple[TaxDetail, ...] = ()


class TaxAddress(WireModel):
    """Address used for the computation, with its resolved tax region."""

    address: str | None = None
    address_code: str | None = None
    city: str | None = None
    country: str | None = None
    region: str | None = None
    postal_code: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    tax_region_id: int | None = None
    juris_code: str | None = None


class TaxResult(WireModel):
    """Result of a tax computation."""

    doc_code: str | None = None
    doc_date: CalendarDate | None = None
    timestamp: str | None = None
    total_amount: Amount | None = None
    total_discount: Amount | None = None
    total_exemption: Amount | None = None
    total_taxable: Amount | None = None
    total_tax: Amount | None = None
    total_tax_calculated: Amount | None = None
    tax_date: CalendarDate | None = None
    tax_lines: tuple[TaxLine, ...] = ()
    tax_summary: tuple[TaxDetail, ...] = ()
    tax_addresses: tuple[TaxAddress, ...] = ()
    result_code: SeverityLevel
    messages: tuple[Message, ...] = ()


class CancelResult(WireModel):
    """
    Result of a cancellation.

    The service answers with HTTP 200 even when nothing was cancelled;
    ``result_code`` is the only indication of the outcome.
    """

    transaction_id: str | None = None
    doc_id: str | None = None
    result_code: SeverityLevel
    messages: tuple[Message, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def unwrap_envelope(cls, data: Any) -> Any:
        """Accept the ``{"CancelTaxResult": {...}}`` envelope the API sends."""
        if isinstance(data, dict):
            inner = data.get("CancelTaxResult")
            if isinstance(inner, dict):
                return _without_nulls(inner)
        return data


class GeoTaxResult(WireModel):
    """Tax estimated from coordinates and a sale amount."""

    rate: float | None = None
    tax: Amount | None = None
    tax_details: tuple[TaxDetail, ...] = ()
    result_code: SeverityLevel
    messages: tuple[Message, ...] = ()
