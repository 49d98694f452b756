"""
Shipping Quote API Routes

POST /shipping-quote          - aggregate quotes across stores x couriers
GET  /shipping-quote/options  - print option tables + courier list
POST /shipping-quote/weight   - print spec -> shipment weight

Mounted both at the root and under /api.

The client sends a pre-calculated weightGrams with the quote request; the
quote endpoint does courier aggregation only.
"""
import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, Request
from pydantic import ValidationError as PydanticValidationError

from printship.api.deps import get_aggregation_service
from printship.core.config import settings
from printship.core.exceptions import ValidationError
from printship.core.rate_limit import limiter
from printship.modules.printing.specs import (
    BINDING_TYPES,
    BINDING_WEIGHT,
    GSM_MULTIPLIER,
    GSM_OPTIONS,
    PACKAGING_TYPES,
    PACKAGING_WEIGHT,
    PAGE_SIZE_BASE_WEIGHT,
    PAGE_SIZES,
    PRINT_SIDES,
)
from printship.modules.printing.weight import calculate_weight
from printship.modules.shipping.catalog import COURIER_CONFIG
from printship.schemas.shipping import QUOTE_FIELD_ERRORS, QuoteRequest, WeightRequest
from printship.services.aggregation_service import AggregationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/shipping-quote", tags=["shipping-quote"])


def parse_quote_request(body: Any) -> QuoteRequest:
    """Validate a raw quote body, reporting the first bad field in client terms."""
    try:
        return QuoteRequest.model_validate(body)
    except PydanticValidationError as e:
        errors = e.errors()
        field = str(errors[0]["loc"][0]) if errors and errors[0].get("loc") else ""
        raise ValidationError(QUOTE_FIELD_ERRORS.get(field, "Invalid quote request"))


@router.post("")
@limiter.limit(settings.RATE_LIMIT_QUOTE)
async def get_shipping_quote(
    request: Request,
    body: Dict[str, Any] = Body(...),
    service: AggregationService = Depends(get_aggregation_service),
):
    """
    Aggregate quotes for one parcel.

    Always 200 once the request is valid, even when no courier could quote.
    """
    quote_request = parse_quote_request(body)
    result = await service.aggregate_shipping_quotes(
        quote_request.destination_pincode,
        quote_request.weight_grams,
        quote_request.courier_ids,
    )
    return result.to_dict()


@router.get("/options")
async def get_shipping_options():
    """All config values the client needs to fill dropdowns and compute weight locally."""
    return {
        "pageSizes": PAGE_SIZES,
        "gsmOptions": GSM_OPTIONS,
        "bindingTypes": BINDING_TYPES,
        "packagingTypes": PACKAGING_TYPES,
        "printSides": PRINT_SIDES,
        "pageSizeBaseWeight": PAGE_SIZE_BASE_WEIGHT,
        "gsmMultiplier": GSM_MULTIPLIER,
        "bindingWeight": BINDING_WEIGHT,
        "packagingWeight": PACKAGING_WEIGHT,
        "couriers": [courier.to_dict() for courier in COURIER_CONFIG],
    }


@router.post("/weight")
async def compute_weight(payload: WeightRequest):
    # UnknownOptionError -> 400 via the PrintShipError handler
    return calculate_weight(payload.to_spec()).to_dict()
