"""Pydantic API schemas for the Shipping domain.

These are the external API contracts, separate from domain commands.
The API layer translates between these schemas and domain commands.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------
class CreateShipmentRequest(BaseModel):
    origin: str
    destination: str
    package_name: str
    package_description: str | None = None
    weight: float | None = Field(default=None, gt=0)
    dimensions: str | None = None
    package_type: str | None = None
    delivery_speed: str | None = None
    recipient_name: str
    recipient_phone: str
    recipient_email: str | None = None
    payment_reference: str


class UpdateRecipientRequest(BaseModel):
    recipient_name: str | None = None
    recipient_phone: str | None = None
    recipient_email: str | None = None
    expected_revision: int | None = None


class UpdateStatusRequest(BaseModel):
    status: str
    expected_revision: int | None = None


class AssignDriverRequest(BaseModel):
    driver_id: str | None = None
    expected_revision: int | None = None


class RegisterDriverRequest(BaseModel):
    name: str
    email: str
    phone: str
    license_number: str
    address: str | None = None
    vehicle_type: str | None = None
    status: str | None = None


class UpdateDriverRequest(BaseModel):
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    license_number: str | None = None
    address: str | None = None
    vehicle_type: str | None = None
    status: str | None = None


class UpdateProfileRequest(BaseModel):
    name: str | None = None
    phone: str | None = None
    address: str | None = None


class ChangeRoleRequest(BaseModel):
    role: str


class ConfigureGeocoderRequest(BaseModel):
    should_succeed: bool = True
    failure_reason: str = "Geocoding service unavailable"
    delay: float = 0.0


class ConfigurePaymentsRequest(BaseModel):
    should_confirm: bool = True
    declined_references: list[str] = []


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------
class ShipmentCreatedResponse(BaseModel):
    shipment_id: str
    tracking_code: str


class RevisionResponse(BaseModel):
    status: str
    revision: int


class StatusResponse(BaseModel):
    status: str


class DriverIdResponse(BaseModel):
    driver_id: str


class ShipmentResponse(BaseModel):
    id: str
    tracking_code: str
    owner_id: str
    status: str
    driver_id: str | None = None
    origin: str
    destination: str
    package_name: str
    package_description: str | None = None
    weight: float | None = None
    dimensions: str | None = None
    package_type: str
    delivery_speed: str
    recipient_name: str
    recipient_phone: str
    recipient_email: str | None = None
    revision: int
    created_at: datetime | None = None
    updated_at: datetime | None = None
    transit_date: datetime | None = None
    delivery_date: datetime | None = None

    @classmethod
    def from_shipment(cls, shipment) -> "ShipmentResponse":
        return cls(
            id=str(shipment.id),
            tracking_code=shipment.tracking_code,
            owner_id=str(shipment.owner_id),
            status=shipment.status,
            driver_id=str(shipment.driver_id) if shipment.driver_id else None,
            origin=shipment.origin,
            destination=shipment.destination,
            package_name=shipment.package_name,
            package_description=shipment.package_description,
            weight=shipment.weight,
            dimensions=shipment.dimensions,
            package_type=shipment.package_type,
            delivery_speed=shipment.delivery_speed,
            recipient_name=shipment.recipient_name,
            recipient_phone=shipment.recipient_phone,
            recipient_email=shipment.recipient_email,
            revision=shipment.revision or 0,
            created_at=shipment.created_at,
            updated_at=shipment.updated_at,
            transit_date=shipment.transit_date,
            delivery_date=shipment.delivery_date,
        )


class DashboardResponse(BaseModel):
    total: int
    pending: int
    in_transit: int
    delivered: int
    recent: list[ShipmentResponse]


class DriverResponse(BaseModel):
    id: str
    name: str
    email: str
    phone: str
    address: str | None = None
    license_number: str
    vehicle_type: str
    status: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_driver(cls, driver) -> "DriverResponse":
        return cls(
            id=str(driver.id),
            name=driver.name,
            email=driver.email,
            phone=driver.phone,
            address=driver.address,
            license_number=driver.license_number,
            vehicle_type=driver.vehicle_type,
            status=driver.status,
            created_at=driver.created_at,
            updated_at=driver.updated_at,
        )


class ProfileResponse(BaseModel):
    user_id: str
    role: str
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None

    @classmethod
    def from_profile(cls, profile) -> "ProfileResponse":
        return cls(
            user_id=str(profile.user_id),
            role=profile.role,
            name=profile.name,
            email=profile.email,
            phone=profile.phone,
            address=profile.address,
        )


class DriverCardResponse(BaseModel):
    name: str
    phone: str | None = None
    vehicle_type: str | None = None
    assigned: bool


class TimelineStepResponse(BaseModel):
    title: str
    reached: bool
    at: datetime | None = None
    note: str | None = None


class TrackingResponse(BaseModel):
    shipment: ShipmentResponse
    status_label: str
    status_description: str
    driver: DriverCardResponse
    timeline: list[TimelineStepResponse]
    location: dict | None = None
    location_message: str | None = None


class GeocoderConfigResponse(BaseModel):
    geocoder: str
    should_succeed: bool
    failure_reason: str
    delay: float


class PaymentsConfigResponse(BaseModel):
    payments: str
    should_confirm: bool
    declined_references: list[str]
