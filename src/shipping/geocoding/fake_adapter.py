"""Configurable fake geocoder for development and testing.

Known places resolve to fixed coordinates; anything else gets a stable
position derived from a hash of the address, so repeated lookups agree.
Can be told to fail or to stall, which is how the tracking view's
degradation path is exercised.
"""

import hashlib
import time

from shipping.errors import GeocodeUnavailable
from shipping.geocoding.port import Coordinates, GeocodingService

KNOWN_PLACES = {
    "springfield": Coordinates(lat=39.7817, lng=-89.6501),
    "chicago": Coordinates(lat=41.8781, lng=-87.6298),
    "new york": Coordinates(lat=40.7128, lng=-74.0060),
    "los angeles": Coordinates(lat=34.0522, lng=-118.2437),
    "london": Coordinates(lat=51.5074, lng=-0.1278),
}


def _hashed_coordinates(address: str) -> Coordinates:
    digest = hashlib.sha256(address.strip().lower().encode("utf-8")).digest()
    lat = int.from_bytes(digest[:4], "big") / 0xFFFFFFFF * 140.0 - 70.0
    lng = int.from_bytes(digest[4:8], "big") / 0xFFFFFFFF * 340.0 - 170.0
    return Coordinates(lat=round(lat, 4), lng=round(lng, 4))


class FakeGeocoder(GeocodingService):
    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Geocoding service unavailable"
        self.delay: float = 0.0
        self.calls: list[dict] = []

    def configure(
        self,
        should_succeed: bool,
        failure_reason: str = "Geocoding service unavailable",
        delay: float = 0.0,
    ) -> None:
        """Configure geocoder behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.delay = delay

    def geocode(self, address: str) -> Coordinates:
        self.calls.append({"method": "geocode", "address": address})
        if self.delay:
            time.sleep(self.delay)
        if not self.should_succeed:
            raise GeocodeUnavailable(self.failure_reason)

        key = address.strip().lower()
        for place, coordinates in KNOWN_PLACES.items():
            if place in key:
                return coordinates
        return _hashed_coordinates(address)
