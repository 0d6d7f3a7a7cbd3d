"""Shipping bounded context: shipment lifecycle, drivers and tracking."""
