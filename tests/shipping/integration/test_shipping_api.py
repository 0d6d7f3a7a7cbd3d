"""Integration tests for the Shipping API via TestClient."""

import asyncio
import time

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from shipping.api import (
    admin_router,
    dashboard_router,
    profile_router,
    register_exception_handlers,
    shipment_router,
    tracking_router,
)

OWNER = {"X-User-Id": "user-001"}
OTHER = {"X-User-Id": "user-002"}


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(shipment_router)
    app.include_router(tracking_router)
    app.include_router(dashboard_router)
    app.include_router(admin_router)
    app.include_router(profile_router)
    register_exception_handlers(app)
    return TestClient(app)


@pytest.fixture()
def admin(admin_id):
    return {"X-User-Id": admin_id}


def _create_shipment(client, headers=OWNER, **overrides):
    payload = {
        "origin": "12 Market St, Chicago",
        "destination": "742 Evergreen Terrace, Springfield",
        "package_name": "Laptop",
        "weight": 2.5,
        "package_type": "fragile",
        "recipient_name": "Marge Simpson",
        "recipient_phone": "555-0100",
        "recipient_email": "marge@example.com",
        "payment_reference": "pay_api",
    }
    payload.update(overrides)
    response = client.post("/shipments", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def _register_driver(client, admin, **overrides):
    payload = {
        "name": "Otto Mann",
        "email": "otto@example.com",
        "phone": "555-0199",
        "license_number": "DL-12345",
        "vehicle_type": "van",
    }
    payload.update(overrides)
    response = client.post("/admin/drivers", json=payload, headers=admin)
    assert response.status_code == 201, response.text
    return response.json()["driver_id"]


class TestCreateShipmentAPI:
    def test_returns_id_and_tracking_code(self, client):
        data = _create_shipment(client)
        assert data["shipment_id"]
        assert data["tracking_code"].startswith("TRK")
        assert len(data["tracking_code"]) == 9

    def test_missing_identity_is_forbidden(self, client):
        response = client.post(
            "/shipments",
            json={
                "origin": "A",
                "destination": "B",
                "package_name": "Box",
                "recipient_name": "R",
                "recipient_phone": "1",
                "payment_reference": "pay_x",
            },
        )
        assert response.status_code == 403
        assert response.json()["redirect"] == "/login"

    def test_anonymous_read_redirects_to_login(self, client):
        response = client.get("/shipments")
        assert response.status_code == 403
        assert response.json()["redirect"] == "/login"

    def test_unconfirmed_payment_is_400(self, client):
        from shipping.payment import get_payments

        get_payments().configure(should_confirm=False)
        response = client.post(
            "/shipments",
            json={
                "origin": "A",
                "destination": "B",
                "package_name": "Box",
                "recipient_name": "R",
                "recipient_phone": "1",
                "payment_reference": "pay_x",
            },
            headers=OWNER,
        )
        assert response.status_code == 400

    def test_non_positive_weight_is_rejected(self, client):
        response = client.post(
            "/shipments",
            json={
                "origin": "A",
                "destination": "B",
                "package_name": "Box",
                "weight": 0,
                "recipient_name": "R",
                "recipient_phone": "1",
                "payment_reference": "pay_x",
            },
            headers=OWNER,
        )
        assert response.status_code == 422


class TestShipmentReadsAPI:
    def test_list_own_shipments(self, client):
        _create_shipment(client)
        _create_shipment(client, headers=OTHER)

        response = client.get("/shipments", headers=OWNER)

        assert response.status_code == 200
        assert len(response.json()) == 1
        assert response.json()[0]["owner_id"] == "user-001"

    def test_view_shipment(self, client):
        created = _create_shipment(client)
        response = client.get(f"/shipments/{created['shipment_id']}", headers=OWNER)
        assert response.status_code == 200
        assert response.json()["status"] == "pending"
        assert response.json()["revision"] == 0

    def test_other_user_gets_403_with_redirect(self, client):
        created = _create_shipment(client)
        response = client.get(f"/shipments/{created['shipment_id']}", headers=OTHER)
        assert response.status_code == 403
        assert response.json()["redirect"] == "/dashboard/shipments"

    def test_missing_shipment_is_404(self, client):
        response = client.get("/shipments/does-not-exist", headers=OWNER)
        assert response.status_code == 404

    def test_dashboard(self, client):
        _create_shipment(client)
        _create_shipment(client)
        response = client.get("/dashboard", headers=OWNER)
        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 2
        assert body["pending"] == 2
        assert len(body["recent"]) == 2


class TestRecipientAPI:
    def test_owner_updates_recipient(self, client):
        created = _create_shipment(client)
        response = client.put(
            f"/shipments/{created['shipment_id']}/recipient",
            json={"recipient_phone": "555-0999"},
            headers=OWNER,
        )
        assert response.status_code == 200
        assert response.json()["revision"] == 1

    def test_empty_email_clears_it(self, client):
        created = _create_shipment(client)
        client.put(
            f"/shipments/{created['shipment_id']}/recipient",
            json={"recipient_email": ""},
            headers=OWNER,
        )
        shipment = client.get(f"/shipments/{created['shipment_id']}", headers=OWNER).json()
        assert shipment["recipient_email"] is None
        assert shipment["recipient_name"] == "Marge Simpson"

    def test_stale_revision_is_409(self, client):
        created = _create_shipment(client)
        url = f"/shipments/{created['shipment_id']}/recipient"
        client.put(url, json={"recipient_name": "Homer"}, headers=OWNER)

        response = client.put(url, json={"recipient_name": "Bart", "expected_revision": 0}, headers=OWNER)

        assert response.status_code == 409
        assert response.json()["actual_revision"] == 1


class TestAdminShipmentAPI:
    def test_status_lifecycle(self, client, admin):
        created = _create_shipment(client)
        url = f"/admin/shipments/{created['shipment_id']}/status"

        assert client.put(url, json={"status": "in_transit"}, headers=admin).status_code == 200
        assert client.put(url, json={"status": "delivered"}, headers=admin).status_code == 200

        shipment = client.get(f"/shipments/{created['shipment_id']}", headers=OWNER).json()
        assert shipment["status"] == "delivered"
        assert shipment["transit_date"] is not None
        assert shipment["delivery_date"] is not None

    def test_invalid_status_is_400(self, client, admin):
        created = _create_shipment(client)
        response = client.put(
            f"/admin/shipments/{created['shipment_id']}/status",
            json={"status": "teleported"},
            headers=admin,
        )
        assert response.status_code == 400

    def test_user_cannot_update_status(self, client):
        created = _create_shipment(client)
        response = client.put(
            f"/admin/shipments/{created['shipment_id']}/status",
            json={"status": "delivered"},
            headers=OWNER,
        )
        assert response.status_code == 403
        assert response.json()["redirect"] == "/dashboard"

    def test_admin_lists_and_searches(self, client, admin):
        _create_shipment(client, package_name="Guitar")
        _create_shipment(client, headers=OTHER, package_name="Drum")

        assert len(client.get("/admin/shipments", headers=admin).json()) == 2
        found = client.get("/admin/shipments", params={"search": "drum"}, headers=admin).json()
        assert [s["package_name"] for s in found] == ["Drum"]

    def test_assign_and_unassign_driver(self, client, admin):
        created = _create_shipment(client)
        driver_id = _register_driver(client, admin)
        url = f"/admin/shipments/{created['shipment_id']}/driver"

        assert client.put(url, json={"driver_id": driver_id}, headers=admin).status_code == 200
        shipment = client.get(f"/shipments/{created['shipment_id']}", headers=OWNER).json()
        assert shipment["driver_id"] == driver_id

        assert client.put(url, json={"driver_id": "none"}, headers=admin).status_code == 200
        shipment = client.get(f"/shipments/{created['shipment_id']}", headers=OWNER).json()
        assert shipment["driver_id"] is None

    def test_assign_unknown_driver_is_404(self, client, admin):
        created = _create_shipment(client)
        response = client.put(
            f"/admin/shipments/{created['shipment_id']}/driver",
            json={"driver_id": "ghost"},
            headers=admin,
        )
        assert response.status_code == 404

    def test_delete_shipment(self, client, admin):
        created = _create_shipment(client)
        assert client.delete(f"/admin/shipments/{created['shipment_id']}", headers=admin).status_code == 200
        assert client.get(f"/shipments/{created['shipment_id']}", headers=OWNER).status_code == 404


class TestDriverAPI:
    def test_register_list_update_delete(self, client, admin):
        driver_id = _register_driver(client, admin)

        listed = client.get("/admin/drivers", headers=admin).json()
        assert [d["id"] for d in listed] == [driver_id]

        response = client.put(f"/admin/drivers/{driver_id}", json={"status": "offline"}, headers=admin)
        assert response.status_code == 200
        assert client.get(f"/admin/drivers/{driver_id}", headers=admin).json()["status"] == "offline"

        assert client.delete(f"/admin/drivers/{driver_id}", headers=admin).status_code == 200
        assert client.get(f"/admin/drivers/{driver_id}", headers=admin).status_code == 404

    def test_search_drivers(self, client, admin):
        _register_driver(client, admin)
        _register_driver(client, admin, name="Hans Moleman", email="hans@example.com")

        found = client.get("/admin/drivers", params={"search": "moleman"}, headers=admin).json()
        assert [d["name"] for d in found] == ["Hans Moleman"]

    def test_user_cannot_view_drivers(self, client):
        assert client.get("/admin/drivers", headers=OWNER).status_code == 403


class TestTrackingAPI:
    def test_track_own_shipment(self, client):
        created = _create_shipment(client)
        response = client.get(f"/tracking/{created['tracking_code']}", headers=OWNER)

        assert response.status_code == 200
        body = response.json()
        assert body["status_label"] == "Pending"
        assert body["driver"]["name"] == "Not Assigned"
        assert [step["title"] for step in body["timeline"]] == ["Shipment Created", "In Transit", "Delivered"]
        assert body["location"]["destination"]["lat"] == 39.7817

    def test_location_unavailable(self, client):
        from shipping.geocoding import get_geocoder

        get_geocoder().configure(should_succeed=False)
        created = _create_shipment(client)

        body = client.get(f"/tracking/{created['tracking_code']}", headers=OWNER).json()

        assert body["location"] is None
        assert body["location_message"] == "Location unavailable"

    def test_unknown_code_is_404(self, client):
        assert client.get("/tracking/TRK000000", headers=OWNER).status_code == 404

    def test_other_user_is_forbidden(self, client):
        created = _create_shipment(client)
        assert client.get(f"/tracking/{created['tracking_code']}", headers=OTHER).status_code == 403

    def test_slow_geocoding_does_not_hold_up_other_requests(self, client):
        from shipping.geocoding import get_geocoder

        created = _create_shipment(client)
        get_geocoder().configure(delay=1.0)

        async def timed(http, path):
            started = time.monotonic()
            response = await http.get(path, headers=OWNER)
            return response.status_code, time.monotonic() - started

        async def scenario():
            transport = httpx.ASGITransport(app=client.app)
            async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as http:
                tracking = asyncio.create_task(timed(http, f"/tracking/{created['tracking_code']}"))
                await asyncio.sleep(0.1)
                profile = await timed(http, "/profile")
                return await tracking, profile

        (tracking_status, tracking_elapsed), (profile_status, profile_elapsed) = asyncio.run(scenario())

        assert tracking_status == 200
        assert tracking_elapsed >= 1.0
        assert profile_status == 200
        assert profile_elapsed < 0.5


class TestProfileAPI:
    def test_view_and_update_profile(self, client):
        assert client.get("/profile", headers=OWNER).json()["role"] == "user"

        response = client.put("/profile", json={"name": "Homer", "address": "742 Evergreen"}, headers=OWNER)

        assert response.status_code == 200
        assert response.json()["name"] == "Homer"
        assert response.json()["address"] == "742 Evergreen"

    def test_admin_changes_role(self, client, admin):
        response = client.put("/admin/users/user-001/role", json={"role": "admin"}, headers=admin)
        assert response.status_code == 200
        assert client.get("/profile", headers=OWNER).json()["role"] == "admin"

    def test_user_cannot_change_roles(self, client):
        response = client.put("/admin/users/user-001/role", json={"role": "admin"}, headers=OWNER)
        assert response.status_code == 403
