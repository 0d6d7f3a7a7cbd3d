"""Application tests for user profiles and role management."""

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from shipping.access.gate import Operation, authorize, resolve_role
from shipping.access.management import ChangeUserRole, UpdateProfile, get_profile
from shipping.access.profile import Role, UserProfile
from shipping.errors import PermissionDenied


class TestLazyProvisioning:
    def test_unknown_caller_gets_user_role(self):
        assert resolve_role("user-fresh") == Role.USER
        assert current_domain.repository_for(UserProfile).get("user-fresh").role == "user"

    def test_provisioned_once(self):
        resolve_role("user-fresh")
        resolve_role("user-fresh")
        profiles = current_domain.repository_for(UserProfile)._dao.query.all().items
        assert [str(p.user_id) for p in profiles] == ["user-fresh"]

    def test_blank_identity_redirects_to_login(self):
        with pytest.raises(PermissionDenied) as exc:
            authorize("", Operation.CREATE_SHIPMENT)
        assert exc.value.redirect_to == "/login"


class TestOwnProfile:
    def test_get_profile(self):
        assert str(get_profile("user-001").user_id) == "user-001"

    def test_update_profile(self):
        current_domain.process(
            UpdateProfile(caller_id="user-001", name="Homer", phone="555-0101"),
            asynchronous=False,
        )
        profile = get_profile("user-001")
        assert profile.name == "Homer"
        assert profile.phone == "555-0101"
        assert profile.address is None


class TestChangeUserRole:
    def test_admin_promotes_user(self, admin_id):
        current_domain.process(ChangeUserRole(caller_id=admin_id, user_id="user-001", role="admin"), asynchronous=False)
        assert resolve_role("user-001") == Role.ADMIN

    def test_admin_demotes_self(self, admin_id):
        current_domain.process(ChangeUserRole(caller_id=admin_id, user_id=admin_id, role="user"), asynchronous=False)
        assert resolve_role(admin_id) == Role.USER

    def test_unknown_role_rejected(self, admin_id):
        with pytest.raises(ValidationError) as exc:
            current_domain.process(
                ChangeUserRole(caller_id=admin_id, user_id="user-001", role="superuser"),
                asynchronous=False,
            )
        assert "role" in exc.value.messages

    def test_user_cannot_change_roles(self):
        with pytest.raises(PermissionDenied):
            current_domain.process(
                ChangeUserRole(caller_id="user-001", user_id="user-001", role="admin"),
                asynchronous=False,
            )
        assert resolve_role("user-001") == Role.USER
