# core/upi.py
import logging
import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Optional
from urllib.parse import urlencode

from app.core.config import settings
from app.models.upi_link_model import PaymentLinkRequest

logger = logging.getLogger("coffee.upi")

UPI_SCHEME = "upi://pay"
CURRENCY = "INR"

_NON_AMOUNT_CHARS = re.compile(r"[^0-9.]")
_LEADING_ZEROS = re.compile(r"^0+(?=\d)")
# a minus sign anywhere ahead of the first digit, e.g. "-5", "₹-5", "INR -5"
_NEGATIVE = re.compile(r"^[^0-9]*-")


class InvalidPayeeAddress(ValueError):
    """Raised when a link is requested without a usable payee address."""


@dataclass(frozen=True)
class PayeeConfig:
    payee_address: str
    payee_name: str

    @classmethod
    def from_settings(cls, s=settings) -> "PayeeConfig":
        return cls(payee_address=s.UPI_VPA, payee_name=s.PAYEE_NAME)


def _clean(value: Optional[str]) -> Optional[str]:
    """Trimmed value, or None when blank."""
    if value is None:
        return None
    value = value.strip()
    return value or None


# --------------------------------------------------------------
# Amount sanitization
# --------------------------------------------------------------
def sanitize_amount(raw: Optional[str]) -> str:
    """
    Turn whatever was typed into the amount box into a decimal string.

    Only digits and the first decimal point survive, the fraction is cut to
    two digits and leading zeros go (except the one before the point).
    Never raises; an empty result means "payer chooses the amount".
    """
    cleaned = _NON_AMOUNT_CHARS.sub("", raw or "")
    parts = cleaned.split(".")[:2]
    if len(parts) == 2:
        parts[1] = parts[1][:2]
    normalized = ".".join(parts)
    return _LEADING_ZEROS.sub("", normalized)


def format_amount(raw: Optional[str]) -> Optional[str]:
    """The `am` value for a raw amount, or None when it must be left out."""
    if _NEGATIVE.match(raw or ""):
        # sanitizing would drop the sign and turn a negative into a positive
        return None
    sanitized = sanitize_amount(raw)
    if not sanitized:
        return None
    try:
        value = Decimal(sanitized)
        if value <= 0:
            return None
        return str(value.quantize(Decimal("0.01")))
    except InvalidOperation:
        # a lone ".", or more digits than the decimal context holds
        return None


# --------------------------------------------------------------
# URI assembly
# --------------------------------------------------------------
class UpiLinkBuilder:
    """Builds `upi://pay` deep links. Holds configuration only, no state."""

    def __init__(self, config: PayeeConfig):
        self.config = config

    def resolve(self, request: PaymentLinkRequest) -> PaymentLinkRequest:
        """Fill fields the caller did not send with the configured defaults."""
        updates = {}
        if request.payee_address is None:
            updates["payee_address"] = self.config.payee_address
        if request.payee_name is None:
            updates["payee_name"] = self.config.payee_name
        return request.model_copy(update=updates) if updates else request

    def params(self, request: PaymentLinkRequest) -> dict:
        payee_address = _clean(request.payee_address)
        if not payee_address:
            raise InvalidPayeeAddress("payee address is required")

        # insertion order is the query order
        params = {"pa": payee_address}

        payee_name = _clean(request.payee_name)
        if payee_name:
            params["pn"] = payee_name

        amount = format_amount(request.amount)
        if amount:
            params["am"] = amount

        params["cu"] = CURRENCY

        note = _clean(request.note)
        if note:
            params["tn"] = note

        return params

    def build(self, request: PaymentLinkRequest) -> str:
        params = self.params(request)
        uri = f"{UPI_SCHEME}?{urlencode(params)}"
        logger.debug(f"Built UPI link: {uri}")
        return uri


def get_link_builder() -> UpiLinkBuilder:
    return UpiLinkBuilder(PayeeConfig.from_settings())


def build_upi_uri(
    payee_address: str,
    payee_name: Optional[str] = None,
    amount: Optional[str] = None,
    note: Optional[str] = None,
) -> str:
    request = PaymentLinkRequest(
        payee_address=payee_address,
        payee_name=payee_name,
        amount=amount,
        note=note,
    )
    return UpiLinkBuilder(PayeeConfig.from_settings()).build(request)
