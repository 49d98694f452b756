"""
Tests for the quote, weight and shipment API routes.
"""
from typing import Optional
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from printship.api.deps import get_aggregation_service, get_shipment_service
from printship.core.exceptions import ShipmentError
from printship.main import app
from printship.modules.shipping.carriers import CourierRegistry
from printship.modules.shipping.carriers.base import (
    BaseCourier,
    CancelResult,
    CourierQuote,
    LabelResult,
    ShipmentResponse,
    ShippingOption,
)
from printship.modules.shipping.carriers.ekart import SURFACE, EkartCourier
from printship.modules.shipping.carriers.formula import dtdc
from printship.services.aggregation_service import AggregatedResult, AggregationService
from printship.services.shipment_service import ShipmentService


class ScriptedCourier(BaseCourier):
    """Courier with a full, scripted shipment lifecycle."""

    courier_id = "scripted"
    courier_name = "Scripted"

    def __init__(self, fail_booking: bool = False):
        super().__init__()
        self.fail_booking = fail_booking
        self.booked = []

    async def get_quote(self, payload):
        return CourierQuote(self.courier_id, self.courier_name, 99, 2)

    async def create_shipment(self, payload):
        if self.fail_booking:
            raise ShipmentError("Scripted API error: 500")
        self.booked.append(payload)
        return ShipmentResponse(tracking_id="SCR-1", courier_name=self.courier_name, label_url="https://l/1.pdf")

    async def cancel_shipment(self, tracking_id: str, order_id: Optional[str] = None):
        return CancelResult(success=True)

    async def get_label(self, tracking_id: str, order_id: Optional[str] = None):
        return LabelResult(label_url=f"https://l/{tracking_id}.pdf")

    async def track_shipment(self, tracking_id: str):
        return {"trackingId": tracking_id, "status": "IN_TRANSIT"}


@pytest.fixture
def client():
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def aggregation_service():
    option = ShippingOption(
        courier_id="shift", courier_name="Shift (Budget)", price=88, delivery_days=4,
        store_pincode="560001", store_name="Bangalore Warehouse",
    )
    service = AsyncMock(spec=AggregationService)
    service.aggregate_shipping_quotes.return_value = AggregatedResult(weight_grams=500, all_options=[option])
    app.dependency_overrides[get_aggregation_service] = lambda: service
    return service


@pytest.fixture
def scripted_courier():
    return ScriptedCourier()


@pytest.fixture
def shipment_service(courier_settings, token_cache, scripted_courier):
    registry = CourierRegistry([
        dtdc(),
        EkartCourier(SURFACE, token_cache=token_cache, settings=courier_settings),
        scripted_courier,
    ])
    service = ShipmentService(registry, settings=courier_settings)
    app.dependency_overrides[get_shipment_service] = lambda: service
    return service


def shipment_body(courier_id: str, **overrides) -> dict:
    body = {
        "orderId": "ORD-42",
        "courierId": courier_id,
        "deliveryAddress": {"name": "Asha", "phone": "9000000000", "pincode": "560001", "address": "MG Road"},
        "items": [{"title": "Notebook", "quantity": 2, "price": 150}],
        "weightGrams": 750,
        "amount": 300,
    }
    body.update(overrides)
    return body


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "service": "PrintShip Shipping Engine"}


class TestShippingQuoteEndpoint:
    """POST /shipping-quote and /api/shipping-quote."""

    @pytest.mark.parametrize("path", ["/shipping-quote", "/api/shipping-quote"])
    def test_valid_request(self, client, aggregation_service, path):
        response = client.post(path, json={"destinationPincode": "110001", "weightGrams": 500})

        assert response.status_code == 200
        data = response.json()
        assert data["cheapest"]["courierId"] == "shift"
        assert data["fastest"]["storeName"] == "Bangalore Warehouse"
        assert len(data["allOptions"]) == 1
        assert data["weightGrams"] == 500
        aggregation_service.aggregate_shipping_quotes.assert_awaited_once_with("110001", 500, None)

    def test_courier_filter_passed_through(self, client, aggregation_service):
        client.post(
            "/shipping-quote",
            json={"destinationPincode": "110001", "weightGrams": 250.5, "courierIds": ["shift", "shipmozo"]},
        )

        aggregation_service.aggregate_shipping_quotes.assert_awaited_once_with("110001", 250.5, ["shift", "shipmozo"])

    def test_empty_result_is_still_200(self, client, aggregation_service):
        aggregation_service.aggregate_shipping_quotes.return_value = AggregatedResult(weight_grams=500)

        response = client.post("/shipping-quote", json={"destinationPincode": "110001", "weightGrams": 500})

        assert response.status_code == 200
        assert response.json() == {"cheapest": None, "fastest": None, "allOptions": [], "weightGrams": 500}

    @pytest.mark.parametrize(
        "body,error",
        [
            ({"destinationPincode": "11001", "weightGrams": 500}, "destinationPincode must be a 6-digit string"),
            ({"destinationPincode": "11000a", "weightGrams": 500}, "destinationPincode must be a 6-digit string"),
            ({"destinationPincode": 110001, "weightGrams": 500}, "destinationPincode must be a 6-digit string"),
            ({"weightGrams": 500}, "destinationPincode must be a 6-digit string"),
            ({"destinationPincode": "110001", "weightGrams": 0}, "weightGrams must be a positive number"),
            ({"destinationPincode": "110001", "weightGrams": -10}, "weightGrams must be a positive number"),
            ({"destinationPincode": "110001"}, "weightGrams must be a positive number"),
            ({"destinationPincode": "110001", "weightGrams": 500, "courierIds": "shift"},
             "courierIds must be an array of strings"),
            ({"destinationPincode": "110001", "weightGrams": 500, "courierIds": [1, 2]},
             "courierIds must be an array of strings"),
        ],
    )
    def test_invalid_request_is_400(self, client, aggregation_service, body, error):
        response = client.post("/shipping-quote", json=body)

        assert response.status_code == 400
        assert response.json()["error"] == error
        aggregation_service.aggregate_shipping_quotes.assert_not_awaited()

    def test_non_object_body_is_400(self, client, aggregation_service):
        response = client.post("/shipping-quote", json=["110001", 500])

        assert response.status_code == 400
        assert "error" in response.json()


class TestOptionsEndpoint:
    """GET /shipping-quote/options."""

    @pytest.mark.parametrize("path", ["/shipping-quote/options", "/api/shipping-quote/options"])
    def test_options(self, client, path):
        response = client.get(path)

        assert response.status_code == 200
        data = response.json()
        assert data["pageSizes"] == ["A4", "A3", "A5", "Letter"]
        assert data["gsmOptions"] == ["70", "80", "100", "130"]
        assert data["bindingTypes"] == ["none", "spiral", "perfect", "hardbound"]
        assert data["packagingTypes"] == ["standard", "reinforced"]
        assert data["printSides"] == ["single", "double"]
        assert data["gsmMultiplier"]["130"] == 1.6
        assert data["bindingWeight"]["hardbound"] == 350
        assert {"id": "delhivery", "name": "Delhivery", "enabled": False} in data["couriers"]
        assert len(data["couriers"]) == 9


class TestWeightEndpoint:
    """POST /shipping-quote/weight."""

    def test_weight(self, client):
        response = client.post("/api/shipping-quote/weight", json={
            "pageCount": 20,
            "printSide": "single",
            "pageSize": "A3",
            "gsm": 130,
            "bindingType": "hardbound",
            "packagingType": "reinforced",
        })

        assert response.status_code == 200
        data = response.json()
        assert data["physicalSheets"] == 20
        assert data["totalWeightGrams"] == pytest.approx(906)

    def test_unknown_option_is_400(self, client):
        response = client.post("/shipping-quote/weight", json={
            "pageCount": 10,
            "printSide": "double",
            "pageSize": "B5",
            "gsm": "80",
            "bindingType": "none",
            "packagingType": "standard",
        })

        assert response.status_code == 400
        assert response.json() == {"error": "Unknown page size: B5", "code": "UNKNOWN_OPTION"}

    def test_bad_print_side_is_400(self, client):
        response = client.post("/shipping-quote/weight", json={
            "pageCount": 10,
            "printSide": "triple",
            "pageSize": "A4",
            "gsm": "80",
            "bindingType": "none",
            "packagingType": "standard",
        })

        assert response.status_code == 400
        assert response.json()["error"].startswith("printSide")


class TestShipmentEndpoints:
    """Create / cancel / label / track dispatch."""

    def test_create_with_formula_courier(self, client, shipment_service):
        response = client.post("/api/shipments/create", json=shipment_body("DTDC"))

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["shipment"]["trackingId"].startswith("DTDC")
        assert data["shipment"]["courierName"] == "DTDC"

    def test_create_uses_default_pickup(self, client, shipment_service, scripted_courier):
        response = client.post("/api/shipments/create", json=shipment_body("scripted"))

        assert response.status_code == 200
        assert response.json()["shipment"]["labelUrl"] == "https://l/1.pdf"
        booked = scripted_courier.booked[0]
        assert booked.pickup_address.name == "PrintShip Store"
        assert booked.pickup_address.pincode == "110001"
        assert booked.items[0].quantity == 2
        assert booked.payment_method == "prepaid"

    def test_create_with_explicit_pickup(self, client, shipment_service, scripted_courier):
        pickup = {"name": "Blr Store", "phone": "9111111111", "pincode": "560001", "address": "Indiranagar"}

        client.post("/api/shipments/create", json=shipment_body("scripted", pickupAddress=pickup))

        assert scripted_courier.booked[0].pickup_address.name == "Blr Store"

    def test_unknown_courier_is_400(self, client, shipment_service):
        response = client.post("/api/shipments/create", json=shipment_body("fedex"))

        assert response.status_code == 400
        assert response.json()["code"] == "UNKNOWN_COURIER"

    def test_courier_without_booking_is_400(self, client, shipment_service):
        response = client.post("/api/shipments/create", json=shipment_body("ekart"))

        assert response.status_code == 400
        assert response.json()["code"] == "SHIPMENT_NOT_SUPPORTED"

    def test_booking_failure_is_502(self, client, shipment_service, scripted_courier):
        scripted_courier.fail_booking = True

        response = client.post("/api/shipments/create", json=shipment_body("scripted"))

        assert response.status_code == 502
        assert response.json()["error"] == "Scripted API error: 500"

    def test_missing_delivery_address_is_400(self, client, shipment_service):
        body = shipment_body("scripted")
        del body["deliveryAddress"]

        response = client.post("/api/shipments/create", json=body)

        assert response.status_code == 400
        assert "deliveryAddress" in response.json()["error"]

    def test_cancel(self, client, shipment_service):
        response = client.post("/api/shipments/cancel", json={"courierId": "scripted", "trackingId": "SCR-1"})

        assert response.status_code == 200
        assert response.json() == {"success": True}

    def test_cancel_unsupported_is_400(self, client, shipment_service):
        response = client.post(
            "/api/shipments/cancel", json={"courierId": "dtdc", "trackingId": "DTDC1", "orderId": "ORD-42"}
        )

        assert response.status_code == 400
        assert "does not support cancellation" in response.json()["error"]

    def test_label(self, client, shipment_service):
        response = client.get("/api/shipments/label/scripted/SCR-1")

        assert response.status_code == 200
        assert response.json() == {"labelUrl": "https://l/SCR-1.pdf"}

    def test_label_unsupported_is_empty(self, client, shipment_service):
        assert client.get("/api/shipments/label/dtdc/DTDC1").json() == {"labelUrl": ""}

    def test_track(self, client, shipment_service):
        response = client.get("/api/shipments/track/scripted/SCR-1")

        assert response.status_code == 200
        assert response.json()["status"] == "IN_TRANSIT"

    def test_track_unavailable_is_404(self, client, shipment_service):
        response = client.get("/api/shipments/track/dtdc/DTDC1")

        assert response.status_code == 404
        assert "error" in response.json()

    def test_track_unknown_courier_is_400(self, client, shipment_service):
        assert client.get("/api/shipments/track/fedex/X1").status_code == 400
