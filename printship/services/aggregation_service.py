"""
Multi-Store Courier Aggregation Service

For each enabled store x each enabled courier -> fetch a quote, all at once.
Optionally restricted to specific couriers when courier_ids is given.
Then rank by cheapest and by fastest.

Isolation:
- Adapters already turn ordinary failure into an unavailable quote.
- Each call is additionally wrapped here, so an adapter that raises anyway
  (or overruns QUOTE_TIMEOUT_SECONDS, when set, or hands back something
  that is not a quote) is logged and dropped
  without touching the other results.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

from printship.core.config import settings
from printship.modules.shipping.carriers import CourierRegistry
from printship.modules.shipping.carriers.base import (
    BaseCourier,
    CourierPayload,
    CourierQuote,
    ShippingOption,
)
from printship.modules.shipping.catalog import StoreConfig, get_enabled_stores

logger = logging.getLogger(__name__)

StoresProvider = Callable[[], List[StoreConfig]]


@dataclass(frozen=True)
class AggregatedResult:
    """Every available option in encounter order, plus derived rankings."""
    weight_grams: float
    all_options: List[ShippingOption] = field(default_factory=list)

    @property
    def cheapest(self) -> Optional[ShippingOption]:
        # min() keeps the first of equal prices
        if not self.all_options:
            return None
        return min(self.all_options, key=lambda option: option.price)

    @property
    def fastest(self) -> Optional[ShippingOption]:
        if not self.all_options:
            return None
        return min(self.all_options, key=lambda option: (option.delivery_days, option.price))

    def to_dict(self) -> Dict[str, Any]:
        cheapest = self.cheapest
        fastest = self.fastest
        return {
            "cheapest": cheapest.to_dict() if cheapest else None,
            "fastest": fastest.to_dict() if fastest else None,
            "allOptions": [option.to_dict() for option in self.all_options],
            "weightGrams": self.weight_grams,
        }


class AggregationService:
    """Fans quote requests out across stores and couriers."""

    def __init__(
        self,
        registry: CourierRegistry,
        stores_provider: Optional[StoresProvider] = None,
        quote_timeout_seconds: Optional[float] = None,
    ):
        self.registry = registry
        self.stores_provider = stores_provider or get_enabled_stores
        self.quote_timeout_seconds = (
            quote_timeout_seconds if quote_timeout_seconds is not None else settings.QUOTE_TIMEOUT_SECONDS
        )

    async def _quote_for_store(
        self,
        adapter: BaseCourier,
        store: StoreConfig,
        destination_pincode: str,
        weight_grams: float,
    ) -> Optional[ShippingOption]:
        payload = CourierPayload(
            origin_pincode=store.pincode,
            destination_pincode=destination_pincode,
            weight_grams=weight_grams,
        )
        try:
            if self.quote_timeout_seconds:
                quote = await asyncio.wait_for(adapter.get_quote(payload), timeout=self.quote_timeout_seconds)
            else:
                quote = await adapter.get_quote(payload)
        except asyncio.TimeoutError:
            logger.warning(
                f"[AGGREGATION] Timeout: {adapter.courier_name} from {store.pincode} "
                f"after {self.quote_timeout_seconds}s"
            )
            return None
        except Exception as e:
            logger.error(f"[AGGREGATION] Failed: {adapter.courier_name} from {store.pincode}: {e}", exc_info=True)
            return None

        if not isinstance(quote, CourierQuote):
            logger.error(
                f"[AGGREGATION] {adapter.courier_name} from {store.pincode} "
                f"returned {type(quote).__name__}, not a quote"
            )
            return None

        return ShippingOption.from_quote(quote, store)

    async def aggregate_shipping_quotes(
        self,
        destination_pincode: str,
        weight_grams: float,
        courier_ids: Optional[Sequence[str]] = None,
    ) -> AggregatedResult:
        """
        Quote every enabled (store, courier) pair concurrently.

        Unavailable quotes and failed calls are left out of the result.
        An empty result is a normal outcome, not an error.
        """
        stores = self.stores_provider()
        adapters = self.registry.get_enabled_adapters()

        if courier_ids:
            wanted = set(courier_ids)
            adapters = [adapter for adapter in adapters if adapter.courier_id in wanted]

        tasks = [
            self._quote_for_store(adapter, store, destination_pincode, weight_grams)
            for store in stores
            for adapter in adapters
        ]
        logger.info(
            f"[AGGREGATION] {len(tasks)} quote calls "
            f"({len(stores)} stores x {len(adapters)} couriers) to {destination_pincode} at {weight_grams}g"
        )

        results = await asyncio.gather(*tasks)
        options = [option for option in results if option is not None and option.available]

        logger.info(f"[AGGREGATION] {len(options)}/{len(tasks)} options available")
        return AggregatedResult(weight_grams=weight_grams, all_options=options)
