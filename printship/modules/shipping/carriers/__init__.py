"""
Courier Registry

Holds the ordered master list of adapter instances. Only enabled adapters
are handed to the aggregation service; disabled couriers are filtered out
before any fan-out and are never called.

The same adapter class may be registered more than once for different
service tiers (Ekart surface/express); each instance has its own id.
"""
import logging
import re
from typing import Dict, Iterable, List, Optional

import httpx

from printship.core.config import Settings, settings as default_settings
from printship.modules.shipping.carriers.base import BaseCourier, EnabledCouriersProvider
from printship.modules.shipping.carriers.ekart import EXPRESS, SURFACE, EkartCourier
from printship.modules.shipping.carriers.formula import bluedart, delhivery, dtdc
from printship.modules.shipping.carriers.shift import ShiftCourier
from printship.modules.shipping.carriers.shipmozo import ShipmozoCourier
from printship.modules.shipping.carriers.shipway import ShipwayCourier
from printship.modules.shipping.carriers.shipyaari import ShipyaariCourier
from printship.modules.shipping.token_cache import TokenCache, default_token_cache

logger = logging.getLogger(__name__)

COURIER_ID_ALIASES = {
    "ekart": "ekart_surface",
    "ekartsurface": "ekart_surface",
    "ekartexpress": "ekart_express",
}


def normalize_courier_id(value: str) -> str:
    """'Ekart Express' / 'ekart-express' / 'ekartexpress' -> 'ekart_express'."""
    normalized = re.sub(r"[\s-]+", "_", value.strip().lower())
    return COURIER_ID_ALIASES.get(normalized, normalized)


class CourierRegistry:
    """Ordered set of courier adapters."""

    def __init__(self, adapters: Iterable[BaseCourier]):
        self._adapters: List[BaseCourier] = list(adapters)
        self._by_id: Dict[str, BaseCourier] = {}
        for adapter in self._adapters:
            if adapter.courier_id in self._by_id:
                raise ValueError(f"Duplicate courier id: {adapter.courier_id}")
            self._by_id[adapter.courier_id] = adapter

    @property
    def adapters(self) -> List[BaseCourier]:
        return list(self._adapters)

    def get_enabled_adapters(self) -> List[BaseCourier]:
        """Enabled adapters in master-list order."""
        enabled = [adapter for adapter in self._adapters if adapter.is_enabled()]
        logger.debug(f"[REGISTRY] Enabled couriers: {[a.courier_id for a in enabled]}")
        return enabled

    def get_adapter(self, courier_id: str) -> Optional[BaseCourier]:
        """Look up any registered adapter (enabled or not) by id or alias."""
        return self._by_id.get(normalize_courier_id(courier_id))

    async def close(self) -> None:
        """Close any HTTP clients the adapters created for themselves."""
        for adapter in self._adapters:
            close = getattr(adapter, "close", None)
            if close is not None:
                await close()


def build_default_registry(
    settings: Optional[Settings] = None,
    token_cache: Optional[TokenCache] = None,
    http_client: Optional[httpx.AsyncClient] = None,
    enabled_couriers: Optional[EnabledCouriersProvider] = None,
) -> CourierRegistry:
    """
    Build the master adapter list.

    Add new courier adapters here.
    """
    settings = settings or default_settings
    token_cache = token_cache if token_cache is not None else default_token_cache
    http_kwargs = {"http_client": http_client, "settings": settings, "enabled_couriers": enabled_couriers}

    return CourierRegistry([
        delhivery(enabled_couriers),
        bluedart(enabled_couriers),
        dtdc(enabled_couriers),
        ShipyaariCourier(**http_kwargs),
        EkartCourier(SURFACE, token_cache=token_cache, **http_kwargs),
        EkartCourier(EXPRESS, token_cache=token_cache, **http_kwargs),
        ShipwayCourier(**http_kwargs),
        ShipmozoCourier(**http_kwargs),
        ShiftCourier(**http_kwargs),
    ])


__all__ = [
    "BaseCourier",
    "CourierRegistry",
    "build_default_registry",
    "normalize_courier_id",
]
