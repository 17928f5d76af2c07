import math

from exceptions import InvalidWeightInput


def parse_weight(raw_value: str) -> float:
    """Parses a weight typed by the user, in kilograms."""
    try:
        weight = float(raw_value.strip())
    except (AttributeError, ValueError):
        raise InvalidWeightInput(raw_value)
    if not math.isfinite(weight) or weight <= 0:
        raise InvalidWeightInput(raw_value)
    return weight
