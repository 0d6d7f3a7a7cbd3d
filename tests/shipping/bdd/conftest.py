"""Shared BDD fixtures and step definitions for the Shipping domain."""

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError
from pytest_bdd import given, parsers, then
from shipping.access.profile import Role, UserProfile
from shipping.errors import PermissionDenied
from shipping.shipment.creation import CreateShipment
from shipping.shipment.shipment import Shipment


@pytest.fixture()
def actors():
    """Caller ids by role for the running scenario."""
    return {}


@pytest.fixture()
def outcome():
    """Container for the result or captured error of a When step."""
    return {"result": None, "exc": None}


def _create_shipment_for(owner_id: str, destination: str) -> Shipment:
    shipment_id = current_domain.process(
        CreateShipment(
            caller_id=owner_id,
            origin="12 Market St, Chicago",
            destination=destination,
            package_name="Laptop",
            weight=2.5,
            recipient_name="Marge Simpson",
            recipient_phone="555-0100",
            payment_reference="pay_bdd",
        ),
        asynchronous=False,
    )
    return current_domain.repository_for(Shipment).get(shipment_id)


def _reload(shipment: Shipment) -> Shipment:
    return current_domain.repository_for(Shipment).get(shipment.id)


@pytest.fixture()
def create_shipment_for():
    return _create_shipment_for


@pytest.fixture()
def reload():
    return _reload


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('an administrator "{user_id}"'))
def an_administrator(actors, user_id):
    profile = UserProfile.provision(user_id)
    profile.change_role(Role.ADMIN)
    current_domain.repository_for(UserProfile).add(profile)
    actors["admin"] = user_id


@given(parsers.cfparse('a customer "{user_id}"'))
def a_customer(actors, user_id):
    actors["customer"] = user_id


@given(
    parsers.cfparse('the customer has a shipment to "{destination}"'),
    target_fixture="shipment",
)
def customer_has_shipment(actors, destination):
    return _create_shipment_for(actors["customer"], destination)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the shipment status is "{status}"'))
def shipment_status_is(shipment, status):
    assert _reload(shipment).status == status


@then(parsers.cfparse('access is denied with a redirect to "{path}"'))
def access_denied(outcome, path):
    assert isinstance(outcome["exc"], PermissionDenied)
    assert outcome["exc"].redirect_to == path


@then("the lookup fails with not found")
def lookup_not_found(outcome):
    assert isinstance(outcome["exc"], ObjectNotFoundError)
