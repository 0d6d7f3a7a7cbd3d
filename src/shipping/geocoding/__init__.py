"""Geocoder factory.

Provides get_geocoder() / set_geocoder() to swap implementations:
- FakeGeocoder for development and testing (``GEOCODER_ADAPTER=fake``)
- NominatimGeocoder against OpenStreetMap (``GEOCODER_ADAPTER=nominatim``)
"""

from shipping import settings
from shipping.geocoding.fake_adapter import FakeGeocoder
from shipping.geocoding.nominatim_adapter import NominatimGeocoder
from shipping.geocoding.port import Coordinates, GeocodingService

__all__ = ["Coordinates", "GeocodingService", "get_geocoder", "reset_geocoder", "set_geocoder"]

_current_geocoder: GeocodingService | None = None


def _build_default() -> GeocodingService:
    if settings.GEOCODER_ADAPTER == "nominatim":
        return NominatimGeocoder()
    if settings.GEOCODER_ADAPTER == "fake":
        return FakeGeocoder()
    raise ValueError(f"Unknown geocoder adapter '{settings.GEOCODER_ADAPTER}'")


def get_geocoder() -> GeocodingService:
    """Return the current geocoder, built from ``GEOCODER_ADAPTER`` on first use."""
    global _current_geocoder
    if _current_geocoder is None:
        _current_geocoder = _build_default()
    return _current_geocoder


def set_geocoder(geocoder: GeocodingService) -> None:
    """Override the active geocoder (useful for tests)."""
    global _current_geocoder
    _current_geocoder = geocoder


def reset_geocoder() -> None:
    global _current_geocoder
    _current_geocoder = None
