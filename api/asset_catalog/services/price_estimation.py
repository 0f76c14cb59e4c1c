"""Depreciation-based price estimation for catalogued assets."""

import math
from datetime import date
from typing import Any, Dict, Optional, Union

BASE_VALUES = {
    "electrical": 500,
    "furniture": 300,
    "instrument": 800,
    "jewellery": 1000,
    "transport": 2000,
    "tools": 200,
    "fitness": 400,
}
DEFAULT_BASE_VALUE = 500

# Annual depreciation rate per category
DEPRECIATION_RATES = {
    "electrical": 0.20,
    "furniture": 0.10,
    "instrument": 0.15,
    "jewellery": 0.05,
    "transport": 0.15,
    "tools": 0.10,
    "fitness": 0.15,
}
DEFAULT_DEPRECIATION_RATE = 0.15

# Never estimate below this share of the base value
RESIDUAL_FRACTION = 0.1


class PriceEstimationError(Exception):
    pass


def calculate_asset_age(
    date_purchased: Optional[Union[str, date]], today: Optional[date] = None
) -> Optional[float]:
    """Age in years rounded down to one decimal, or None without a usable date.

    Examples:
        >>> calculate_asset_age("2020-01-01", today=date(2023, 1, 1))
        3.0
        >>> calculate_asset_age("2030-01-01", today=date(2023, 1, 1))
        0
    """
    if not date_purchased:
        return None

    if isinstance(date_purchased, str):
        try:
            date_purchased = date.fromisoformat(date_purchased)
        except ValueError:
            return None

    today = today or date.today()
    years = (today - date_purchased).days / 365.25
    return max(0, math.floor(years * 10) / 10)


def estimate_asset_price(
    make: str,
    model: str,
    category: Optional[str] = None,
    date_purchased: Optional[Union[str, date]] = None,
    today: Optional[date] = None,
) -> Dict[str, Any]:
    """Estimate the current value from category base value and age.

    Raises:
        PriceEstimationError: If make or model is missing
    """
    if not make or not model:
        raise PriceEstimationError("Make and model are required for price estimation")

    key = (category or "").lower()
    base_value = BASE_VALUES.get(key, DEFAULT_BASE_VALUE)
    age = calculate_asset_age(date_purchased, today=today)

    if age is None:
        return {
            "estimated_value": float(base_value),
            "confidence": "low",
            "source": "Estimation Service",
            "notes": "Estimated without age data",
        }

    rate = DEPRECIATION_RATES.get(key, DEFAULT_DEPRECIATION_RATE)
    depreciated = base_value * math.pow(1 - rate, age)

    return {
        "estimated_value": round(max(depreciated, base_value * RESIDUAL_FRACTION), 2),
        "confidence": "medium",
        "source": "Estimation Service",
        "notes": f"Based on {age:g} year{'' if age == 1 else 's'} of depreciation",
    }
