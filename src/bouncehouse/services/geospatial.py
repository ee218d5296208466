"""Geospatial helper functions."""

from __future__ import annotations

import math
import re
from typing import Any

EARTH_RADIUS_MILES = 3959.0

_WHITESPACE = re.compile(r"\s")


def _as_float(value: Any) -> float:
    # Missing values behave like NaN so they propagate instead of raising.
    if value is None:
        return math.nan
    return float(value)


def calculate_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in miles between two coordinates (Haversine formula).

    Inputs are not validated: NaN or missing values yield NaN.
    """

    lat1, lon1, lat2, lon2 = (_as_float(v) for v in (lat1, lon1, lat2, lon2))
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lambda / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(max(0.0, 1 - a)))
    return EARTH_RADIUS_MILES * c


def round_distance(distance: float) -> float:
    """Round to one decimal place, halves rounding up."""

    if not math.isfinite(distance):
        return distance
    return math.floor(distance * 10 + 0.5) / 10


def normalize_zip_code(zip_code: str) -> str:
    """Strip all whitespace and keep the first five characters.

    This is lenient normalization, not validation: "12345-6789" becomes "12345",
    "1234" stays "1234" and non-digit input is passed through truncated.
    """

    return _WHITESPACE.sub("", zip_code)[:5]


def format_address(street: str | None, city: str | None, state: str | None, zip_code: str | None) -> str:
    """Join the non-blank address parts into a single geocodable string."""

    parts = [part.strip() for part in (street, city, state, zip_code) if part and part.strip()]
    return ", ".join(parts)
