"""
API dependencies

Services live on app.state, built once in the application lifespan around a
shared httpx client. Without a lifespan (bare TestClient) they are built on
first use.
"""
from fastapi import Depends, Request

from printship.modules.shipping.carriers import CourierRegistry, build_default_registry
from printship.services.aggregation_service import AggregationService
from printship.services.shipment_service import ShipmentService


def get_courier_registry(request: Request) -> CourierRegistry:
    registry = getattr(request.app.state, "courier_registry", None)
    if registry is None:
        registry = build_default_registry()
        request.app.state.courier_registry = registry
    return registry


def get_aggregation_service(
    request: Request,
    registry: CourierRegistry = Depends(get_courier_registry),
) -> AggregationService:
    service = getattr(request.app.state, "aggregation_service", None)
    if service is None:
        service = AggregationService(registry)
        request.app.state.aggregation_service = service
    return service


def get_shipment_service(
    request: Request,
    registry: CourierRegistry = Depends(get_courier_registry),
) -> ShipmentService:
    service = getattr(request.app.state, "shipment_service", None)
    if service is None:
        service = ShipmentService(registry)
        request.app.state.shipment_service = service
    return service
