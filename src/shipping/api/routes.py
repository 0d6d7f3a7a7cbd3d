"""FastAPI routes for the Shipping domain.

The caller's identity arrives in the ``X-User-Id`` header, set by the
authenticating proxy in front of this service. Every command and query runs
it through the authorization gate.
"""

from fastapi import APIRouter, Depends, Header, HTTPException
from fastapi.concurrency import run_in_threadpool
from protean.utils.globals import current_domain

from shipping import settings
from shipping.access.management import ChangeUserRole, UpdateProfile, get_profile
from shipping.api.schemas import (
    AssignDriverRequest,
    ChangeRoleRequest,
    ConfigureGeocoderRequest,
    ConfigurePaymentsRequest,
    CreateShipmentRequest,
    DashboardResponse,
    DriverIdResponse,
    DriverResponse,
    GeocoderConfigResponse,
    PaymentsConfigResponse,
    ProfileResponse,
    RegisterDriverRequest,
    RevisionResponse,
    ShipmentCreatedResponse,
    ShipmentResponse,
    StatusResponse,
    TrackingResponse,
    UpdateDriverRequest,
    UpdateProfileRequest,
    UpdateRecipientRequest,
    UpdateStatusRequest,
)
from shipping.driver.management import RegisterDriver, RemoveDriver, UpdateDriver
from shipping.driver.queries import get_driver, list_drivers
from shipping.errors import PermissionDenied
from shipping.geocoding import get_geocoder
from shipping.geocoding.fake_adapter import FakeGeocoder
from shipping.payment import get_payments
from shipping.payment.fake_adapter import FakePaymentConfirmation
from shipping.shipment.assignment import AssignDriver
from shipping.shipment.creation import CreateShipment
from shipping.shipment.details import UpdateRecipientDetails
from shipping.shipment.queries import dashboard_summary, get_shipment, list_all, list_for_owner
from shipping.shipment.removal import DeleteShipment
from shipping.shipment.status import UpdateShipmentStatus
from shipping.tracking.view import track_shipment


def caller_identity(x_user_id: str = Header(default="")) -> str:
    """Resolve the authenticated caller; anonymous requests go to login."""
    caller_id = x_user_id.strip()
    if not caller_id:
        raise PermissionDenied("An authenticated identity is required", redirect_to="/login")
    return caller_id


# ---------------------------------------------------------------------------
# Shipment Router (owner side)
# ---------------------------------------------------------------------------
shipment_router = APIRouter(prefix="/shipments", tags=["shipments"])


@shipment_router.post("", status_code=201, response_model=ShipmentCreatedResponse)
async def create_shipment(
    body: CreateShipmentRequest,
    caller_id: str = Depends(caller_identity),
) -> ShipmentCreatedResponse:
    """Create a paid shipment and issue its tracking code."""
    command = CreateShipment(caller_id=caller_id, **body.model_dump())
    shipment_id = current_domain.process(command, asynchronous=False)
    shipment = get_shipment(caller_id, shipment_id)
    return ShipmentCreatedResponse(shipment_id=shipment_id, tracking_code=shipment.tracking_code)


@shipment_router.get("", response_model=list[ShipmentResponse])
async def list_my_shipments(
    status: str | None = None,
    search: str | None = None,
    caller_id: str = Depends(caller_identity),
) -> list[ShipmentResponse]:
    return [ShipmentResponse.from_shipment(s) for s in list_for_owner(caller_id, status, search)]


@shipment_router.get("/{shipment_id}", response_model=ShipmentResponse)
async def view_shipment(shipment_id: str, caller_id: str = Depends(caller_identity)) -> ShipmentResponse:
    return ShipmentResponse.from_shipment(get_shipment(caller_id, shipment_id))


@shipment_router.put("/{shipment_id}/recipient", response_model=RevisionResponse)
async def update_recipient(
    shipment_id: str,
    body: UpdateRecipientRequest,
    caller_id: str = Depends(caller_identity),
) -> RevisionResponse:
    """Edit recipient contact details. Sending an empty email clears it."""
    command = UpdateRecipientDetails(
        shipment_id=shipment_id,
        caller_id=caller_id,
        recipient_name=body.recipient_name,
        recipient_phone=body.recipient_phone,
        recipient_email=body.recipient_email or None,
        clear_recipient_email="recipient_email" in body.model_fields_set and not body.recipient_email,
        expected_revision=body.expected_revision,
    )
    revision = current_domain.process(command, asynchronous=False)
    return RevisionResponse(status="recipient_updated", revision=revision)


# ---------------------------------------------------------------------------
# Tracking & Dashboard
# ---------------------------------------------------------------------------
tracking_router = APIRouter(prefix="/tracking", tags=["tracking"])


@tracking_router.get("/{tracking_code}", response_model=TrackingResponse)
async def track(tracking_code: str, caller_id: str = Depends(caller_identity)) -> TrackingResponse:
    """Tracking page data; the location degrades to a message if geocoding fails."""
    # Geocoding blocks for up to the timeout, so it runs off the event loop
    view = await run_in_threadpool(track_shipment, caller_id, tracking_code)
    return TrackingResponse(
        shipment=ShipmentResponse.from_shipment(view.shipment),
        status_label=view.status_label,
        status_description=view.status_description,
        driver=vars(view.driver),
        timeline=[vars(step) for step in view.timeline],
        location=view.location.to_dict() if view.location else None,
        location_message=view.location_message,
    )


dashboard_router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@dashboard_router.get("", response_model=DashboardResponse)
async def dashboard(caller_id: str = Depends(caller_identity)) -> DashboardResponse:
    summary = dashboard_summary(caller_id)
    return DashboardResponse(
        total=summary.total,
        pending=summary.pending,
        in_transit=summary.in_transit,
        delivered=summary.delivered,
        recent=[ShipmentResponse.from_shipment(s) for s in summary.recent],
    )


# ---------------------------------------------------------------------------
# Admin Router
# ---------------------------------------------------------------------------
admin_router = APIRouter(prefix="/admin", tags=["admin"])


@admin_router.get("/shipments", response_model=list[ShipmentResponse])
async def list_all_shipments(
    status: str | None = None,
    search: str | None = None,
    caller_id: str = Depends(caller_identity),
) -> list[ShipmentResponse]:
    return [ShipmentResponse.from_shipment(s) for s in list_all(caller_id, status, search)]


@admin_router.put("/shipments/{shipment_id}/status", response_model=RevisionResponse)
async def update_shipment_status(
    shipment_id: str,
    body: UpdateStatusRequest,
    caller_id: str = Depends(caller_identity),
) -> RevisionResponse:
    command = UpdateShipmentStatus(
        shipment_id=shipment_id,
        caller_id=caller_id,
        status=body.status,
        expected_revision=body.expected_revision,
    )
    revision = current_domain.process(command, asynchronous=False)
    return RevisionResponse(status="status_updated", revision=revision)


@admin_router.put("/shipments/{shipment_id}/driver", response_model=RevisionResponse)
async def assign_driver(
    shipment_id: str,
    body: AssignDriverRequest,
    caller_id: str = Depends(caller_identity),
) -> RevisionResponse:
    """Assign a driver; ``null``, ``""`` or ``"none"`` clears the assignment."""
    command = AssignDriver(
        shipment_id=shipment_id,
        caller_id=caller_id,
        driver_id=body.driver_id,
        expected_revision=body.expected_revision,
    )
    revision = current_domain.process(command, asynchronous=False)
    return RevisionResponse(status="driver_updated", revision=revision)


@admin_router.delete("/shipments/{shipment_id}", response_model=StatusResponse)
async def delete_shipment(shipment_id: str, caller_id: str = Depends(caller_identity)) -> StatusResponse:
    current_domain.process(DeleteShipment(shipment_id=shipment_id, caller_id=caller_id), asynchronous=False)
    return StatusResponse(status="deleted")


@admin_router.post("/drivers", status_code=201, response_model=DriverIdResponse)
async def register_driver(
    body: RegisterDriverRequest,
    caller_id: str = Depends(caller_identity),
) -> DriverIdResponse:
    driver_id = current_domain.process(RegisterDriver(caller_id=caller_id, **body.model_dump()), asynchronous=False)
    return DriverIdResponse(driver_id=driver_id)


@admin_router.get("/drivers", response_model=list[DriverResponse])
async def list_all_drivers(
    search: str | None = None,
    status: str | None = None,
    caller_id: str = Depends(caller_identity),
) -> list[DriverResponse]:
    return [DriverResponse.from_driver(d) for d in list_drivers(caller_id, search, status)]


@admin_router.get("/drivers/{driver_id}", response_model=DriverResponse)
async def view_driver(driver_id: str, caller_id: str = Depends(caller_identity)) -> DriverResponse:
    return DriverResponse.from_driver(get_driver(caller_id, driver_id))


@admin_router.put("/drivers/{driver_id}", response_model=StatusResponse)
async def update_driver(
    driver_id: str,
    body: UpdateDriverRequest,
    caller_id: str = Depends(caller_identity),
) -> StatusResponse:
    command = UpdateDriver(caller_id=caller_id, driver_id=driver_id, **body.model_dump(exclude_none=True))
    current_domain.process(command, asynchronous=False)
    return StatusResponse(status="driver_updated")


@admin_router.delete("/drivers/{driver_id}", response_model=StatusResponse)
async def remove_driver(driver_id: str, caller_id: str = Depends(caller_identity)) -> StatusResponse:
    current_domain.process(RemoveDriver(caller_id=caller_id, driver_id=driver_id), asynchronous=False)
    return StatusResponse(status="deleted")


@admin_router.put("/users/{user_id}/role", response_model=StatusResponse)
async def change_user_role(
    user_id: str,
    body: ChangeRoleRequest,
    caller_id: str = Depends(caller_identity),
) -> StatusResponse:
    current_domain.process(ChangeUserRole(caller_id=caller_id, user_id=user_id, role=body.role), asynchronous=False)
    return StatusResponse(status="role_changed")


# ---------------------------------------------------------------------------
# Profile Router
# ---------------------------------------------------------------------------
profile_router = APIRouter(prefix="/profile", tags=["profile"])


@profile_router.get("", response_model=ProfileResponse)
async def view_profile(caller_id: str = Depends(caller_identity)) -> ProfileResponse:
    return ProfileResponse.from_profile(get_profile(caller_id))


@profile_router.put("", response_model=ProfileResponse)
async def update_profile(
    body: UpdateProfileRequest,
    caller_id: str = Depends(caller_identity),
) -> ProfileResponse:
    current_domain.process(UpdateProfile(caller_id=caller_id, **body.model_dump(exclude_none=True)), asynchronous=False)
    return ProfileResponse.from_profile(get_profile(caller_id))


# ---------------------------------------------------------------------------
# Dev Router (fake adapter controls, non-production only)
# ---------------------------------------------------------------------------
dev_router = APIRouter(prefix="/dev", tags=["dev"])


@dev_router.post("/geocoder/configure", response_model=GeocoderConfigResponse)
async def configure_geocoder(body: ConfigureGeocoderRequest) -> GeocoderConfigResponse:
    """Configure the FakeGeocoder behavior (non-production only)."""
    if settings.is_production():
        raise HTTPException(status_code=403, detail="Geocoder configuration not available in production")

    geocoder = get_geocoder()
    if not isinstance(geocoder, FakeGeocoder):
        raise HTTPException(status_code=400, detail="Geocoder configuration only available for FakeGeocoder")

    geocoder.configure(should_succeed=body.should_succeed, failure_reason=body.failure_reason, delay=body.delay)
    return GeocoderConfigResponse(
        geocoder=type(geocoder).__name__,
        should_succeed=geocoder.should_succeed,
        failure_reason=geocoder.failure_reason,
        delay=geocoder.delay,
    )


@dev_router.post("/payments/configure", response_model=PaymentsConfigResponse)
async def configure_payments(body: ConfigurePaymentsRequest) -> PaymentsConfigResponse:
    """Configure the FakePaymentConfirmation behavior (non-production only)."""
    if settings.is_production():
        raise HTTPException(status_code=403, detail="Payment configuration not available in production")

    payments = get_payments()
    if not isinstance(payments, FakePaymentConfirmation):
        raise HTTPException(status_code=400, detail="Payment configuration only available for FakePaymentConfirmation")

    payments.configure(should_confirm=body.should_confirm, declined_references=body.declined_references)
    return PaymentsConfigResponse(
        payments=type(payments).__name__,
        should_confirm=payments.should_confirm,
        declined_references=sorted(payments.declined_references),
    )
