"""
Store and Courier Catalog

Static, process-wide configuration. Add stores or toggle couriers here;
disabled couriers are never called.
"""
from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class StoreConfig:
    """A shipping origin (warehouse)."""
    id: str
    name: str
    pincode: str
    enabled: bool = True

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "pincode": self.pincode, "enabled": self.enabled}


@dataclass(frozen=True)
class CourierConfig:
    """Enable/disable toggle for one courier id."""
    id: str
    name: str
    enabled: bool

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "enabled": self.enabled}


STORES: List[StoreConfig] = [
    StoreConfig(id="store-blr", name="Bangalore Warehouse", pincode="560001"),
    StoreConfig(id="store-del", name="Delhi Warehouse", pincode="110001"),
    StoreConfig(id="store-sw-1", name="Shipway Origin 1", pincode="741235"),
    StoreConfig(id="store-sw-2", name="Shipway Origin 2", pincode="411030"),
]

COURIER_CONFIG: List[CourierConfig] = [
    CourierConfig(id="delhivery", name="Delhivery", enabled=False),
    CourierConfig(id="bluedart", name="Bluedart", enabled=False),
    CourierConfig(id="dtdc", name="DTDC", enabled=False),
    CourierConfig(id="shipyaari", name="Shipyaari", enabled=True),
    CourierConfig(id="ekart_surface", name="Ekart Surface", enabled=True),
    CourierConfig(id="ekart_express", name="Ekart Express", enabled=True),
    CourierConfig(id="shipway", name="Shipway", enabled=True),
    CourierConfig(id="shipmozo", name="Shipmozo", enabled=True),
    CourierConfig(id="shift", name="Shift", enabled=True),
]


def get_enabled_stores() -> List[StoreConfig]:
    return [store for store in STORES if store.enabled]


def get_enabled_couriers() -> List[CourierConfig]:
    return [courier for courier in COURIER_CONFIG if courier.enabled]


def is_courier_enabled(courier_id: str) -> bool:
    return any(courier.id == courier_id for courier in get_enabled_couriers())
