"""
Weight Calculation Engine

Pure, deterministic, courier-agnostic and store-agnostic.
Converts print specifications -> shipment weight in grams.

Formula:
    paper_weight = physical_sheets x page_base_weight x gsm_multiplier
    total_weight = paper_weight + binding_weight + packaging_weight

Two variants share that arithmetic:
- calculate_weight: strict. An option key missing from its table raises
  UnknownOptionError naming the option.
- preview_weight: lenient, for live preview while a spec is still being
  edited. Missing keys fall back to base 0, multiplier 1, binding 0 and
  packaging 0.
"""
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Union

from printship.core.exceptions import UnknownOptionError
from printship.modules.printing.specs import (
    BINDING_WEIGHT,
    GSM_MULTIPLIER,
    PACKAGING_WEIGHT,
    PAGE_SIZE_BASE_WEIGHT,
)


@dataclass(frozen=True)
class WeightSpec:
    """One print job as entered by the user."""
    page_count: int  # logical pages
    print_side: str  # single, double
    page_size: str
    gsm: Union[str, int]
    binding_type: str
    packaging_type: str


@dataclass(frozen=True)
class WeightConfig:
    page_size_base_weight: Mapping[str, float] = field(default_factory=lambda: dict(PAGE_SIZE_BASE_WEIGHT))
    gsm_multiplier: Mapping[str, float] = field(default_factory=lambda: dict(GSM_MULTIPLIER))
    binding_weight: Mapping[str, float] = field(default_factory=lambda: dict(BINDING_WEIGHT))
    packaging_weight: Mapping[str, float] = field(default_factory=lambda: dict(PACKAGING_WEIGHT))


DEFAULT_WEIGHT_CONFIG = WeightConfig()


@dataclass(frozen=True)
class WeightResult:
    physical_sheets: int
    paper_weight_grams: float
    binding_weight_grams: float
    packaging_weight_grams: float
    total_weight_grams: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "physicalSheets": self.physical_sheets,
            "paperWeightGrams": self.paper_weight_grams,
            "bindingWeightGrams": self.binding_weight_grams,
            "packagingWeightGrams": self.packaging_weight_grams,
            "totalWeightGrams": self.total_weight_grams,
        }


def get_physical_sheets(page_count: int, print_side: str) -> int:
    """Logical pages -> physical sheets. Double-sided prints two pages per sheet."""
    if page_count <= 0:
        return 0
    return math.ceil(page_count / 2) if print_side == "double" else page_count


def _combine(
    spec: WeightSpec,
    base_weight: float,
    gsm_multiplier: float,
    binding_weight: float,
    packaging_weight: float,
) -> WeightResult:
    physical_sheets = get_physical_sheets(spec.page_count, spec.print_side)
    paper_weight = physical_sheets * base_weight * gsm_multiplier
    return WeightResult(
        physical_sheets=physical_sheets,
        paper_weight_grams=paper_weight,
        binding_weight_grams=binding_weight,
        packaging_weight_grams=packaging_weight,
        total_weight_grams=paper_weight + binding_weight + packaging_weight,
    )


def _lookup(table: Mapping[str, float], key: Any, option: str) -> float:
    value = table.get(str(key))
    if value is None:
        raise UnknownOptionError(option, key)
    return value


def calculate_weight(spec: WeightSpec, config: Optional[WeightConfig] = None) -> WeightResult:
    """
    Calculate total shipment weight from print specs.

    Raises:
        UnknownOptionError: page size, GSM, binding or packaging is not a
            key of its config table
    """
    config = config or DEFAULT_WEIGHT_CONFIG
    return _combine(
        spec,
        base_weight=_lookup(config.page_size_base_weight, spec.page_size, "page size"),
        gsm_multiplier=_lookup(config.gsm_multiplier, spec.gsm, "GSM value"),
        binding_weight=_lookup(config.binding_weight, spec.binding_type, "binding type"),
        packaging_weight=_lookup(config.packaging_weight, spec.packaging_type, "packaging type"),
    )


def preview_weight(spec: WeightSpec, config: Optional[WeightConfig] = None) -> WeightResult:
    """Same arithmetic as calculate_weight, but never raises on unknown options."""
    config = config or DEFAULT_WEIGHT_CONFIG
    return _combine(
        spec,
        base_weight=config.page_size_base_weight.get(str(spec.page_size), 0),
        gsm_multiplier=config.gsm_multiplier.get(str(spec.gsm), 1),
        binding_weight=config.binding_weight.get(str(spec.binding_type), 0),
        packaging_weight=config.packaging_weight.get(str(spec.packaging_type), 0),
    )
