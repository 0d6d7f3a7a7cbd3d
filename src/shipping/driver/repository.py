"""Repository for the Driver aggregate."""

from protean.exceptions import ObjectNotFoundError

from shipping.domain import shipping
from shipping.driver.driver import Driver, DriverStatus
from shipping.utils.store import with_store_retry


@shipping.repository(part_of=Driver)
class DriverRepository:
    def load(self, driver_id: str) -> Driver:
        return with_store_retry(lambda: self.get(driver_id), "load driver")

    def find(self, driver_id: str | None) -> Driver | None:
        """Tolerant lookup for display: a missing or dangling id yields None."""
        if not driver_id:
            return None
        try:
            return self.load(driver_id)
        except ObjectNotFoundError:
            return None

    def roster(self, status: DriverStatus | None = None) -> list[Driver]:
        query = self._dao.query
        if status is not None:
            query = query.filter(status=status.value)
        return with_store_retry(
            lambda: query.order_by("-created_at").limit(None).all().items,
            "list drivers",
        )

    def delete(self, driver: Driver) -> None:
        self._dao.delete(driver)
