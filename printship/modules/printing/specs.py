"""
Print Specification Tables

All weight inputs are config-driven: change a table here, no code changes
needed. Option lists are derived from the table keys so the two can never
disagree.
"""
from typing import Dict, List

# Base weight per sheet in grams at the 80 GSM reference
PAGE_SIZE_BASE_WEIGHT: Dict[str, float] = {
    "A4": 5,
    "A3": 8,
    "A5": 3,
    "Letter": 5,
}

# Multiplier relative to the 80 GSM baseline
GSM_MULTIPLIER: Dict[str, float] = {
    "70": 0.9,
    "80": 1.0,
    "100": 1.25,
    "130": 1.6,
}

# Added weight in grams
BINDING_WEIGHT: Dict[str, float] = {
    "none": 0,
    "spiral": 120,
    "perfect": 180,
    "hardbound": 350,
}

PACKAGING_WEIGHT: Dict[str, float] = {
    "standard": 150,
    "reinforced": 300,
}

PAGE_SIZES: List[str] = list(PAGE_SIZE_BASE_WEIGHT)
GSM_OPTIONS: List[str] = list(GSM_MULTIPLIER)
BINDING_TYPES: List[str] = list(BINDING_WEIGHT)
PACKAGING_TYPES: List[str] = list(PACKAGING_WEIGHT)
PRINT_SIDES: List[str] = ["single", "double"]
