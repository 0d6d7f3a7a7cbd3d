"""Location projection for the tracking view.

The destination is geocoded on every view; nothing is cached or persisted.
While a shipment is in transit a driver marker is synthesized near the
destination. It is a visual approximation, flagged ``synthetic``, and is
recomputed on each request.
"""

import random
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass, field

import structlog

from shipping import settings
from shipping.errors import GeocodeUnavailable
from shipping.geocoding import get_geocoder
from shipping.geocoding.port import Coordinates, GeocodingService
from shipping.shipment.shipment import ShipmentStatus

logger = structlog.get_logger(__name__)

# Shared across projectors: a timed-out lookup keeps its worker until it returns
_executor: ThreadPoolExecutor | None = None


def _geocode_executor() -> ThreadPoolExecutor:
    global _executor
    if _executor is None:
        _executor = ThreadPoolExecutor(max_workers=settings.GEOCODE_WORKERS, thread_name_prefix="geocode")
    return _executor


@dataclass(frozen=True)
class MapMarker:
    kind: str  # "destination" | "driver"
    lat: float
    lng: float
    title: str
    synthetic: bool = False


@dataclass
class LocationView:
    destination: MapMarker
    driver: MapMarker | None = None
    route: list[MapMarker] = field(default_factory=list)
    bounds: dict | None = None

    def to_dict(self) -> dict:
        def marker(m: MapMarker | None) -> dict | None:
            if m is None:
                return None
            return {"kind": m.kind, "lat": m.lat, "lng": m.lng, "title": m.title, "synthetic": m.synthetic}

        return {
            "destination": marker(self.destination),
            "driver": marker(self.driver),
            "route": [marker(m) for m in self.route],
            "bounds": self.bounds,
        }


def synthetic_offset(rng: random.Random, max_offset: float) -> float:
    """Uniform offset in ``[-max_offset, max_offset]``, never exactly zero."""
    offset = 0.0
    while offset == 0.0:
        offset = rng.uniform(-max_offset, max_offset)
    return offset


class LocationProjector:
    def __init__(
        self,
        geocoder: GeocodingService | None = None,
        timeout: float | None = None,
        rng: random.Random | None = None,
        max_offset: float | None = None,
    ) -> None:
        self.geocoder = geocoder or get_geocoder()
        self.timeout = timeout if timeout is not None else settings.GEOCODE_TIMEOUT_SECONDS
        self.rng = rng or random.Random()
        self.max_offset = max_offset if max_offset is not None else settings.SYNTHETIC_POSITION_OFFSET

    def resolve(self, address: str) -> Coordinates:
        """Geocode ``address`` within the timeout.

        Raises:
            GeocodeUnavailable: the geocoder failed or did not answer in time.
        """
        future = _geocode_executor().submit(self.geocoder.geocode, address)
        try:
            return future.result(timeout=self.timeout)
        except FutureTimeoutError:
            future.cancel()
            logger.warning("Geocoding timed out", address=address, timeout=self.timeout)
            raise GeocodeUnavailable(f"Geocoding timed out after {self.timeout}s") from None
        except GeocodeUnavailable:
            raise
        except Exception as exc:
            logger.warning("Geocoder failed", address=address, error=str(exc), error_type=type(exc).__name__)
            raise GeocodeUnavailable(f"Geocoder failed: {exc}") from exc

    def project(self, shipment, driver=None) -> LocationView:
        target = self.resolve(shipment.destination)
        destination = MapMarker(kind="destination", lat=target.lat, lng=target.lng, title="Destination")
        view = LocationView(destination=destination)

        if shipment.status != ShipmentStatus.IN_TRANSIT.value:
            return view

        driver_marker = MapMarker(
            kind="driver",
            lat=target.lat + synthetic_offset(self.rng, self.max_offset),
            lng=target.lng + synthetic_offset(self.rng, self.max_offset),
            title=driver.name if driver is not None else "Driver",
            synthetic=True,
        )
        view.driver = driver_marker
        view.route = [driver_marker, destination]
        view.bounds = {
            "south": min(driver_marker.lat, destination.lat),
            "west": min(driver_marker.lng, destination.lng),
            "north": max(driver_marker.lat, destination.lat),
            "east": max(driver_marker.lng, destination.lng),
        }
        return view
