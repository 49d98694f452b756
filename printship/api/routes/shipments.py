"""
Shipment API Routes

Create / cancel / label / track, dispatched to the courier adapter named in
the request. Nothing is persisted here; the caller keeps the order record.
"""
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from printship.api.deps import get_shipment_service
from printship.schemas.shipping import ShipmentCancelRequest, ShipmentCreateRequest
from printship.services.shipment_service import ShipmentService, default_pickup_address

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/shipments", tags=["shipments"])


@router.post("/create")
async def create_shipment(
    payload: ShipmentCreateRequest,
    service: ShipmentService = Depends(get_shipment_service),
):
    """
    Book a shipment.

    Unknown courier -> 400. Booking failure -> 502 (ShipmentError).
    """
    shipment = await service.create_shipment(payload.to_payload(default_pickup_address(service.settings)))
    return {"success": True, "shipment": shipment.to_dict()}


@router.post("/cancel")
async def cancel_shipment(
    payload: ShipmentCancelRequest,
    service: ShipmentService = Depends(get_shipment_service),
):
    result = await service.cancel_shipment(payload.courier_id, payload.tracking_id, payload.order_id)
    if not result.success:
        return JSONResponse(status_code=400, content={"error": result.message or "Cancellation failed"})
    return {"success": True}


@router.get("/label/{courier_id}/{tracking_id}")
async def get_label(
    courier_id: str,
    tracking_id: str,
    service: ShipmentService = Depends(get_shipment_service),
):
    result = await service.get_label(courier_id, tracking_id)
    return result.to_dict()


@router.get("/track/{courier_id}/{tracking_id}")
async def track_shipment(
    courier_id: str,
    tracking_id: str,
    service: ShipmentService = Depends(get_shipment_service),
):
    status = await service.track_shipment(courier_id, tracking_id)
    if status is None:
        return JSONResponse(status_code=404, content={"error": "Tracking information not available"})
    return status
