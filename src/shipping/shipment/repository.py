"""Repository for the Shipment aggregate."""

from protean.exceptions import ObjectNotFoundError

from shipping.domain import shipping
from shipping.shipment.shipment import Shipment, ShipmentStatus
from shipping.utils.store import with_store_retry


@shipping.repository(part_of=Shipment)
class ShipmentRepository:
    """Shipment persistence plus the lookups the tracking engine needs.

    Reads go through one bounded retry for transient store failures. Lists
    are ordered by ``created_at``, newest first.
    """

    def load(self, shipment_id: str) -> Shipment:
        """Fetch a shipment by id, raising ``ObjectNotFoundError`` if absent."""
        return with_store_retry(lambda: self.get(shipment_id), "load shipment")

    def find_by_tracking_code(self, tracking_code: str) -> Shipment:
        """Return the one shipment holding ``tracking_code``."""
        results = with_store_retry(
            lambda: self._dao.query.filter(tracking_code=tracking_code).all(),
            "find shipment by tracking code",
        )
        if not results.items:
            raise ObjectNotFoundError(f"Shipment with tracking code `{tracking_code}` does not exist.")
        return results.items[0]

    def tracking_code_exists(self, tracking_code: str) -> bool:
        results = with_store_retry(
            lambda: self._dao.query.filter(tracking_code=tracking_code).all(),
            "check tracking code",
        )
        return bool(results.items)

    def for_owner(self, owner_id: str, status: ShipmentStatus | None = None) -> list[Shipment]:
        filters = {"owner_id": owner_id}
        if status is not None:
            filters["status"] = status.value
        return with_store_retry(
            lambda: self._dao.query.filter(**filters).order_by("-created_at").limit(None).all().items,
            "list shipments for owner",
        )

    def everything(self, status: ShipmentStatus | None = None) -> list[Shipment]:
        query = self._dao.query
        if status is not None:
            query = query.filter(status=status.value)
        return with_store_retry(
            lambda: query.order_by("-created_at").limit(None).all().items,
            "list all shipments",
        )

    def referencing_driver(self, driver_id: str) -> list[Shipment]:
        return with_store_retry(
            lambda: self._dao.query.filter(driver_id=driver_id).limit(None).all().items,
            "list shipments for driver",
        )

    def delete(self, shipment: Shipment) -> None:
        self._dao.delete(shipment)
