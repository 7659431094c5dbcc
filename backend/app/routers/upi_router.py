# routers/upi_router.py
import logging
from typing import Optional
from fastapi import APIRouter, HTTPException, Depends, Query, status
from fastapi.responses import RedirectResponse

from app.core.config import settings
from app.core.upi import (
    UpiLinkBuilder,
    InvalidPayeeAddress,
    get_link_builder,
    sanitize_amount,
)
from app.models.upi_link_model import (
    PaymentLinkRequest,
    UpiLinkResponse,
    SanitizedAmount,
    PageConfig,
)

logger = logging.getLogger("coffee")
router = APIRouter(prefix="/upi", tags=["UPI"])


def query_link_request(
    pa: Optional[str] = Query(default=None, description="Payee address (VPA)"),
    pn: Optional[str] = Query(default=None, description="Payee name"),
    am: Optional[str] = Query(default=None, description="Amount in rupees"),
    tn: Optional[str] = Query(default=None, description="Transaction note"),
) -> PaymentLinkRequest:
    return PaymentLinkRequest(payee_address=pa, payee_name=pn, amount=am, note=tn)


def make_link(builder: UpiLinkBuilder, payload: PaymentLinkRequest) -> UpiLinkResponse:
    request = builder.resolve(payload)
    try:
        params = builder.params(request)
        uri = builder.build(request)
    except InvalidPayeeAddress as e:
        logger.warning(f"Rejected UPI link request: {e}")
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Payee UPI ID is required"
        )

    return UpiLinkResponse(
        uri=uri,
        payee_address=params["pa"],
        payee_name=params.get("pn"),
        amount=params.get("am"),
        note=params.get("tn"),
        currency=params["cu"],
    )


# --------------------------------------------------------------
# 1. PAGE CONFIG
# --------------------------------------------------------------
@router.get("/config", response_model=PageConfig)
async def get_page_config(builder: UpiLinkBuilder = Depends(get_link_builder)):
    return PageConfig(
        payee_address=builder.config.payee_address,
        payee_name=builder.config.payee_name,
        default_note=settings.DEFAULT_NOTE,
        preset_amounts=settings.PRESET_AMOUNTS,
    )


# --------------------------------------------------------------
# 2. BUILD LINK
# --------------------------------------------------------------
@router.post("/link", response_model=UpiLinkResponse)
async def create_link(
    payload: PaymentLinkRequest,
    builder: UpiLinkBuilder = Depends(get_link_builder)
):
    return make_link(builder, payload)


@router.get("/link", response_model=UpiLinkResponse)
async def get_link(
    payload: PaymentLinkRequest = Depends(query_link_request),
    builder: UpiLinkBuilder = Depends(get_link_builder)
):
    return make_link(builder, payload)


# --------------------------------------------------------------
# 3. SANITIZE AMOUNT
# --------------------------------------------------------------
@router.get("/sanitize", response_model=SanitizedAmount)
async def sanitize(amount: str = ""):
    return SanitizedAmount(raw=amount, amount=sanitize_amount(amount))


# --------------------------------------------------------------
# 4. PUBLIC: REDIRECT TO UPI APP
# --------------------------------------------------------------
@router.get("/pay", include_in_schema=False)
async def pay(
    payload: PaymentLinkRequest = Depends(query_link_request),
    builder: UpiLinkBuilder = Depends(get_link_builder)
):
    link = make_link(builder, payload)
    logger.info(f"Redirecting payer to {link.uri}")
    return RedirectResponse(link.uri, status_code=status.HTTP_307_TEMPORARY_REDIRECT)
