"""UserProfile aggregate: the local record of an externally authenticated user.

The authentication provider only hands us an opaque identity. The profile,
keyed by that identity, holds the role that drives authorization plus a few
contact details the user can edit. A profile is provisioned lazily, with role
``user``, the first time an identity is seen.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import DateTime, Identifier, String

from shipping.domain import shipping

# Sentinel for distinguishing "not provided" from None in partial updates
_UNSET = object()


class Role(Enum):
    USER = "user"
    ADMIN = "admin"


@shipping.event(part_of="UserProfile")
class UserProfileProvisioned:
    """A profile was created for a first-time caller."""

    __version__ = 1

    user_id = Identifier(required=True)
    role = String(required=True)
    provisioned_at = DateTime(required=True)


@shipping.event(part_of="UserProfile")
class UserRoleChanged:
    """An administrator changed a user's role."""

    __version__ = 1

    user_id = Identifier(required=True)
    previous_role = String(required=True)
    new_role = String(required=True)
    changed_at = DateTime(required=True)


@shipping.aggregate
class UserProfile:
    user_id = Identifier(identifier=True, required=True)
    role = String(max_length=10, choices=Role, default=Role.USER.value)
    name = String(max_length=200)
    email = String(max_length=254)
    phone = String(max_length=30)
    address = String(max_length=500)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def provision(cls, user_id: str, email: str | None = None, name: str | None = None):
        """Create the default profile for a first-time caller."""
        now = datetime.now(UTC)
        profile = cls(
            user_id=user_id,
            role=Role.USER.value,
            email=email,
            name=name,
            created_at=now,
            updated_at=now,
        )
        profile.raise_(
            UserProfileProvisioned(
                user_id=user_id,
                role=Role.USER.value,
                provisioned_at=now,
            )
        )
        return profile

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value

    def update_contact(self, name=_UNSET, phone=_UNSET, address=_UNSET) -> None:
        if name is not _UNSET:
            self.name = name
        if phone is not _UNSET:
            self.phone = phone
        if address is not _UNSET:
            self.address = address
        self.updated_at = datetime.now(UTC)

    def change_role(self, role: Role) -> None:
        previous = self.role
        now = datetime.now(UTC)
        self.role = role.value
        self.updated_at = now
        self.raise_(
            UserRoleChanged(
                user_id=str(self.user_id),
                previous_role=previous,
                new_role=role.value,
                changed_at=now,
            )
        )
