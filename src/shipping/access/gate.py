"""Authorization gate: the single place roles and ownership are checked.

Every command handler and read query calls ``authorize`` before touching a
repository. The gate only decides: on denial it raises ``PermissionDenied``
carrying the path the presentation layer should redirect to.
"""

from enum import Enum

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from shipping.access.profile import Role, UserProfile
from shipping.errors import PermissionDenied
from shipping.utils.store import with_store_retry

logger = structlog.get_logger(__name__)


class Operation(Enum):
    CREATE_SHIPMENT = "create_shipment"
    VIEW_OWN_SHIPMENTS = "view_own_shipments"
    VIEW_SHIPMENT = "view_shipment"
    UPDATE_SHIPMENT = "update_shipment"
    LIST_ALL_SHIPMENTS = "list_all_shipments"
    UPDATE_STATUS = "update_status"
    ASSIGN_DRIVER = "assign_driver"
    DELETE_SHIPMENT = "delete_shipment"
    VIEW_DRIVERS = "view_drivers"
    MANAGE_DRIVERS = "manage_drivers"
    MANAGE_OWN_PROFILE = "manage_own_profile"
    MANAGE_USERS = "manage_users"


ADMIN_ONLY_OPERATIONS = frozenset(
    {
        Operation.LIST_ALL_SHIPMENTS,
        Operation.UPDATE_STATUS,
        Operation.ASSIGN_DRIVER,
        Operation.DELETE_SHIPMENT,
        Operation.VIEW_DRIVERS,
        Operation.MANAGE_DRIVERS,
        Operation.MANAGE_USERS,
    }
)

# Allowed for the shipment's owner regardless of role, and for admins
OWNER_SCOPED_OPERATIONS = frozenset({Operation.VIEW_SHIPMENT, Operation.UPDATE_SHIPMENT})


def load_or_provision_profile(caller_id: str) -> UserProfile:
    """Return the caller's profile, creating a default one on first contact."""
    repo = current_domain.repository_for(UserProfile)
    try:
        return with_store_retry(lambda: repo.get(caller_id), "load user profile")
    except ObjectNotFoundError:
        profile = UserProfile.provision(caller_id)
        repo.add(profile)
        logger.info("User profile provisioned", user_id=caller_id)
        return profile


def resolve_profile(caller_id: str) -> UserProfile:
    if not caller_id:
        raise PermissionDenied("An authenticated identity is required", redirect_to="/login")
    return load_or_provision_profile(caller_id)


def resolve_role(caller_id: str) -> Role:
    return Role(resolve_profile(caller_id).role)


def authorize(caller_id: str, operation: Operation, shipment=None) -> Role:
    """Resolve the caller's role and check it against ``operation``.

    ``shipment`` is required for owner-scoped operations: owners pass on
    their own shipments whatever their role, admins pass on any shipment.

    Raises:
        PermissionDenied: the caller may not perform the operation.
    """
    return check(resolve_profile(caller_id), operation, shipment)


def check(profile: UserProfile, operation: Operation, shipment=None) -> Role:
    """Decide ``operation`` for an already resolved profile."""
    caller_id = str(profile.user_id)
    role = Role(profile.role)
    is_admin = role == Role.ADMIN

    if operation in ADMIN_ONLY_OPERATIONS and not is_admin:
        logger.warning("Admin operation denied", user_id=caller_id, operation=operation.value)
        raise PermissionDenied(f"Operation '{operation.value}' requires the admin role")

    if operation in OWNER_SCOPED_OPERATIONS:
        if shipment is None:
            raise ValueError(f"Operation '{operation.value}' needs the shipment to check ownership")
        if not is_admin and not shipment.is_owned_by(caller_id):
            logger.warning(
                "Shipment access denied",
                user_id=caller_id,
                operation=operation.value,
                shipment_id=str(shipment.id),
            )
            raise PermissionDenied("You do not have permission to access this shipment", redirect_to="/dashboard/shipments")

    return role
