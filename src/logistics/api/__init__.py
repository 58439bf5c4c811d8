"""Logistics domain API package."""

from logistics.api.errors import register_exception_handlers
from logistics.api.routes import commission_router, shipment_router

__all__ = ["shipment_router", "commission_router", "register_exception_handlers"]
