import pytest
from protean import current_domain
from protean.integrations.pytest import DomainFixture

from shipping.access.profile import Role, UserProfile
from shipping.geocoding import reset_geocoder
from shipping.payment import reset_payments


@pytest.fixture(scope="session")
def shipping_bed():
    from shipping.domain import shipping

    bed = DomainFixture(shipping)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(shipping_bed):
    with shipping_bed.domain_context():
        yield


@pytest.fixture(autouse=True)
def _fresh_adapters():
    """Every test starts with default fake geocoder and payment adapters."""
    reset_geocoder()
    reset_payments()
    yield
    reset_geocoder()
    reset_payments()


@pytest.fixture()
def make_admin():
    def _make_admin(user_id: str = "admin-001") -> str:
        profile = UserProfile.provision(user_id)
        profile.change_role(Role.ADMIN)
        current_domain.repository_for(UserProfile).add(profile)
        return user_id

    return _make_admin


@pytest.fixture()
def admin_id(make_admin):
    return make_admin()
