"""Great-circle distances between named locations."""

import math
from typing import Mapping, NamedTuple

EARTH_RADIUS_KM = 6371.0
DEFAULT_FALLBACK_KM = 300.0


class Coordinates(NamedTuple):
    """Latitude/longitude in decimal degrees."""

    latitude: float
    longitude: float


# Trailheads and common departure cities.
LOCATION_COORDINATES: dict[str, Coordinates] = {
    "jakarta": Coordinates(-6.2088, 106.8456),
    "bandung": Coordinates(-6.9175, 107.6191),
    "yogyakarta": Coordinates(-7.7956, 110.3695),
    "surabaya": Coordinates(-7.2575, 112.7521),
    "bali": Coordinates(-8.4095, 115.1889),
    "lombok": Coordinates(-8.5069, 116.1944),  # Rinjani
    "malang": Coordinates(-7.9666, 112.6326),  # Semeru
    "magelang": Coordinates(-7.4698, 110.2182),  # Merapi
}


class DistanceLookup(NamedTuple):
    """Distance plus whether both endpoints were found."""

    distance_km: float
    resolved: bool


def haversine_km(a: Coordinates, b: Coordinates) -> float:
    """Compute great-circle distance on Earth."""
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    dlat = lat2 - lat1
    dlon = math.radians(b.longitude - a.longitude)

    h = (
        math.sin(dlat / 2.0) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2.0) ** 2
    )
    c = 2.0 * math.atan2(math.sqrt(h), math.sqrt(max(1.0 - h, 0.0)))
    return EARTH_RADIUS_KM * c


class GeoDistance:
    """Distance lookups over a fixed table of named locations."""

    def __init__(
        self,
        locations: Mapping[str, Coordinates] = LOCATION_COORDINATES,
        fallback_km: float = DEFAULT_FALLBACK_KM,
    ):
        self.locations = {name.lower(): coords for name, coords in locations.items()}
        self.fallback_km = fallback_km

    def knows(self, location: str) -> bool:
        return location.strip().lower() in self.locations

    def lookup(self, location_a: str, location_b: str) -> DistanceLookup:
        """Distance between two named locations.

        Unknown names yield the fallback distance with ``resolved=False``.
        """
        a = self.locations.get(location_a.strip().lower())
        b = self.locations.get(location_b.strip().lower())
        if a is None or b is None:
            return DistanceLookup(self.fallback_km, False)
        return DistanceLookup(haversine_km(a, b), True)

    def distance_km(self, location_a: str, location_b: str) -> float:
        return self.lookup(location_a, location_b).distance_km
