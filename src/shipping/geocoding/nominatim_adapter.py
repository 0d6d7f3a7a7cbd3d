"""Nominatim (OpenStreetMap) geocoder over HTTP."""

import requests
import structlog

from shipping import settings
from shipping.errors import GeocodeUnavailable
from shipping.geocoding.port import Coordinates, GeocodingService

logger = structlog.get_logger(__name__)


class NominatimGeocoder(GeocodingService):
    def __init__(
        self,
        base_url: str | None = None,
        user_agent: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self.base_url = base_url or settings.NOMINATIM_URL
        self.user_agent = user_agent or settings.NOMINATIM_USER_AGENT
        self.timeout = timeout if timeout is not None else settings.GEOCODE_TIMEOUT_SECONDS

    def geocode(self, address: str) -> Coordinates:
        params = {"q": address, "format": "json", "limit": 1}
        headers = {"User-Agent": self.user_agent}

        try:
            response = requests.get(self.base_url, params=params, headers=headers, timeout=self.timeout)
            response.raise_for_status()
            results = response.json()
        except (requests.RequestException, ValueError) as exc:
            logger.warning("Geocoding request failed", address=address, error=str(exc))
            raise GeocodeUnavailable(f"Geocoding failed for '{address}'") from exc

        if not results:
            raise GeocodeUnavailable(f"No match for '{address}'")

        try:
            return Coordinates(lat=float(results[0]["lat"]), lng=float(results[0]["lon"]))
        except (KeyError, TypeError, ValueError) as exc:
            raise GeocodeUnavailable(f"Malformed geocoding response for '{address}'") from exc
