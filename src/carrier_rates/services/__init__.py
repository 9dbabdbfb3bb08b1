from .shipping_service import ShippingService, build_shipping_service

__all__ = ["ShippingService", "build_shipping_service"]
