# models/upi_link_model.py
from pydantic import BaseModel, Field
from typing import Optional, List, Literal


class PaymentLinkRequest(BaseModel):
    """What the page sends every time the amount, note or payee changes.

    ``None`` means the field was not supplied. Blank strings are kept as given
    and treated as absent by the builder.
    """
    payee_address: Optional[str] = Field(default=None, description="UPI VPA, e.g. 'name@bank'")
    payee_name: Optional[str] = Field(default=None, description="Shown in the payer's UPI app")
    amount: Optional[str] = Field(default=None, description="Free-form amount in rupees, e.g. '125.50'")
    note: Optional[str] = Field(default=None, description="Transaction note")
    currency: Literal["INR"] = "INR"


class UpiLinkResponse(BaseModel):
    uri: str
    payee_address: str
    payee_name: Optional[str] = None
    amount: Optional[str] = None       # exactly as placed in `am`, e.g. "50.00"
    note: Optional[str] = None
    currency: Literal["INR"] = "INR"


class SanitizedAmount(BaseModel):
    raw: str
    amount: str


class PageConfig(BaseModel):
    """Values the page needs on load."""
    payee_address: str
    payee_name: str
    default_note: str
    preset_amounts: List[int]
    currency: Literal["INR"] = "INR"
