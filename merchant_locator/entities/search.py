import math
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional, Tuple

from .exceptions import ValidationError

DEFAULT_RADIUS_KM = 2.0
MIN_RADIUS_KM = 0.1
MAX_RADIUS_KM = 50.0

DEFAULT_LIMIT = 25
MIN_LIMIT = 1
MAX_LIMIT = 100

DISTANCE_UNIT = "KM"


def _to_number(value, fallback: float) -> float:
    if value is None:
        return fallback

    if isinstance(value, str):
        value = value.strip()
        if not value:
            return fallback

    try:
        number = float(value)
    except (TypeError, ValueError):
        return fallback

    return number if math.isfinite(number) else fallback


def _clamp(value, lower, upper):
    return max(lower, min(upper, value))


def format_number(value: float) -> str:
    """
    Render a finite number the way JavaScript's ``String(n)`` does: shortest
    round-trip digits, plain notation for decimal exponents from -7 to 20,
    ``1e-7`` / ``1e+21`` style outside that range.
    """
    value = float(value)
    if value == 0:
        return "0"

    sign = "-" if value < 0 else ""
    parsed = Decimal(repr(abs(value))).as_tuple()
    digits = "".join(str(digit) for digit in parsed.digits).rstrip("0")
    # value == 0.digits * 10 ** point
    point = len(parsed.digits) + parsed.exponent
    count = len(digits)

    if count <= point <= 21:
        return sign + digits + "0" * (point - count)
    if 0 < point <= 21:
        return sign + digits[:point] + "." + digits[point:]
    if -6 < point <= 0:
        return sign + "0." + "0" * -point + digits

    exponent = point - 1
    mantissa = digits[0] + ("." + digits[1:] if count > 1 else "")
    return f"{sign}{mantissa}e{'+' if exponent > 0 else '-'}{abs(exponent)}"


@dataclass(frozen=True)
class SearchParams:
    latitude: float
    longitude: float
    radius_km: float = DEFAULT_RADIUS_KM
    limit: int = DEFAULT_LIMIT
    name: Optional[str] = None

    @staticmethod
    def from_query(
        lat=None,
        lng=None,
        radius_km=None,
        limit=None,
        name=None,
    ) -> "SearchParams":
        """
        Parse raw query values. Latitude and longitude are mandatory numbers,
        radius and limit fall back to their defaults and are clamped.

        Raises:
            ValidationError: when latitude or longitude is missing or not a finite number.
        """
        latitude = _to_number(lat, math.nan)
        longitude = _to_number(lng, math.nan)
        if math.isnan(latitude) or math.isnan(longitude):
            raise ValidationError()

        radius = _clamp(_to_number(radius_km, DEFAULT_RADIUS_KM), MIN_RADIUS_KM, MAX_RADIUS_KM)
        count = _clamp(math.floor(_to_number(limit, DEFAULT_LIMIT)), MIN_LIMIT, MAX_LIMIT)
        name = (name or "").strip() or None

        return SearchParams(latitude, longitude, radius, int(count), name)

    def to_query_parameters(self) -> List[Tuple[str, str]]:
        parameters = [
            ("latitude", format_number(self.latitude)),
            ("longitude", format_number(self.longitude)),
            ("radius", format_number(self.radius_km)),
            ("distanceUnit", DISTANCE_UNIT),
            ("max", str(self.limit)),
        ]
        if self.name:
            parameters.append(("name", self.name))

        return parameters
