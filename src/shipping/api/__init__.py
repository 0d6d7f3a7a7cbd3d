"""Shipping domain API package."""

from shipping.api.errors import register_exception_handlers
from shipping.api.routes import (
    admin_router,
    dashboard_router,
    dev_router,
    profile_router,
    shipment_router,
    tracking_router,
)

__all__ = [
    "admin_router",
    "dashboard_router",
    "dev_router",
    "profile_router",
    "register_exception_handlers",
    "shipment_router",
    "tracking_router",
]
