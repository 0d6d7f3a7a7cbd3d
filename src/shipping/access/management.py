"""User profile management: commands, handler and the profile query."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from shipping.access.gate import Operation, check, load_or_provision_profile, resolve_profile
from shipping.access.profile import Role, UserProfile
from shipping.domain import shipping


@shipping.command(part_of="UserProfile")
class UpdateProfile:
    """Edit the caller's own contact details."""

    caller_id = Identifier(required=True)
    name = String(max_length=200)
    phone = String(max_length=30)
    address = String(max_length=500)


@shipping.command(part_of="UserProfile")
class ChangeUserRole:
    """Promote or demote a user (admin only)."""

    caller_id = Identifier(required=True)
    user_id = Identifier(required=True)
    role = String(required=True, max_length=10)


@shipping.command_handler(part_of=UserProfile)
class UserProfileHandler:
    @handle(UpdateProfile)
    def update_profile(self, command):
        profile = resolve_profile(command.caller_id)
        check(profile, Operation.MANAGE_OWN_PROFILE)

        changes = {
            field: getattr(command, field)
            for field in ("name", "phone", "address")
            if getattr(command, field) is not None
        }
        profile.update_contact(**changes)
        current_domain.repository_for(UserProfile).add(profile)

    @handle(ChangeUserRole)
    def change_user_role(self, command):
        caller = resolve_profile(command.caller_id)
        check(caller, Operation.MANAGE_USERS)
        try:
            role = Role(command.role)
        except ValueError:
            raise ValidationError({"role": [f"Unknown role '{command.role}'"]}) from None

        if str(command.user_id) == str(caller.user_id):
            target = caller
        else:
            target = load_or_provision_profile(command.user_id)
        target.change_role(role)
        current_domain.repository_for(UserProfile).add(target)


def get_profile(caller_id: str) -> UserProfile:
    """Return the caller's own profile, provisioning it on first contact."""
    profile = resolve_profile(caller_id)
    check(profile, Operation.MANAGE_OWN_PROFILE)
    return profile
