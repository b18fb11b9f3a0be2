from __future__ import annotations

import math
from dataclasses import dataclass

from .errors import InvalidCoordinate

# Mean earth radius; spherical approximation
EARTH_RADIUS_KM = 6371.0


@dataclass(frozen=True)
class Coordinate:
    """Immutable latitude/longitude pair in decimal degrees."""
    lat: float
    lon: float

    def __post_init__(self):
        try:
            lat = float(self.lat)
            lon = float(self.lon)
        except (TypeError, ValueError):
            raise InvalidCoordinate(f"Invalid coordinate ({self.lat!r}, {self.lon!r})")
        if not (math.isfinite(lat) and math.isfinite(lon)):
            raise InvalidCoordinate(f"Coordinate must be finite, got ({lat}, {lon})")
        if not (-90 <= lat <= 90 and -180 <= lon <= 180):
            raise InvalidCoordinate(f"Coordinate out of bounds ({lat}, {lon})")
        object.__setattr__(self, "lat", lat)
        object.__setattr__(self, "lon", lon)

    def distance_to(self, other: "Coordinate") -> float:
        return haversine_km(self, other)


def haversine_km(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance in km between two coordinates (haversine formula)."""
    phi1 = math.radians(a.lat)
    phi2 = math.radians(b.lat)
    d_phi = math.radians(b.lat - a.lat)
    d_lambda = math.radians(b.lon - a.lon)

    h = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    # clamp against rounding drift for antipodal points
    h = min(1.0, h)
    return 2 * EARTH_RADIUS_KM * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def latitude_band(center: Coordinate, distance_km: float) -> tuple:
    """Latitude range that contains every point within distance_km of center.

    Any point inside the radius differs from the center by at most
    distance_km / R radians of latitude, so the band never excludes a match.
    """
    # small slack absorbs float rounding at the band edge
    delta = math.degrees(distance_km / EARTH_RADIUS_KM) * (1 + 1e-9) + 1e-9
    return max(-90.0, center.lat - delta), min(90.0, center.lat + delta)
