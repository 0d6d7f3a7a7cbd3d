"""Geocoding port (abstract interface).

Resolves a free-text address to a coordinate pair. Adapters: ``FakeGeocoder``
for development and tests, ``NominatimGeocoder`` against an OpenStreetMap
Nominatim endpoint.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lng: float


class GeocodingService(ABC):
    """Abstract geocoding interface."""

    @abstractmethod
    def geocode(self, address: str) -> Coordinates:
        """Resolve ``address``.

        Raises:
            GeocodeUnavailable: the address could not be resolved.
        """
        ...
