"""Runtime settings for the Shipping domain, read from the environment.

Protean's own configuration (databases, brokers, event store) lives in
``domain.toml``; these are the knobs for the adapters and the tracking
engine that sit outside Protean.
"""

import os

# Identifier issuance
TRACKING_CODE_MAX_ATTEMPTS = int(os.environ.get("TRACKING_CODE_MAX_ATTEMPTS", "20"))

# Geocoding
GEOCODER_ADAPTER = os.environ.get("GEOCODER_ADAPTER", "fake")
NOMINATIM_URL = os.environ.get("NOMINATIM_URL", "https://nominatim.openstreetmap.org/search")
NOMINATIM_USER_AGENT = os.environ.get("NOMINATIM_USER_AGENT", "shipping-tracker/0.1")
GEOCODE_TIMEOUT_SECONDS = float(os.environ.get("GEOCODE_TIMEOUT_SECONDS", "3.0"))
GEOCODE_WORKERS = int(os.environ.get("GEOCODE_WORKERS", "4"))

# Synthetic driver position: max offset in degrees on each axis
SYNTHETIC_POSITION_OFFSET = 0.025

# Payments
PAYMENT_ADAPTER = os.environ.get("PAYMENT_ADAPTER", "fake")

# Dashboard
RECENT_ACTIVITY_LIMIT = 5


def is_production() -> bool:
    return os.environ.get("PROTEAN_ENV") == "production"
