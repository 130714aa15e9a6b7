"""Enrollment configuration.

All settings can be overridden in your Django settings.py. They are read
at call time so ``override_settings`` works in tests.

Example:
    # settings.py
    STUDIO_CART_TTL_MINUTES = 45
    STUDIO_PAYMENT_GATEWAY = 'vipps'
"""

from datetime import timedelta

from django.conf import settings

from enrollment.domain.discounts import StandardPriceList


def get_setting(name: str, default=None):
    """Get a setting with STUDIO_ prefix."""
    return getattr(settings, f"STUDIO_{name}", default)


def cart_ttl() -> timedelta:
    """How long a cart item lives after it was added."""
    return timedelta(minutes=get_setting("CART_TTL_MINUTES", 30))


def cart_storage_key() -> str:
    """Prefix of the cache keys holding cart snapshots."""
    return get_setting("CART_STORAGE_KEY", "danceStudio_cart")


def catalog_cache_timeout() -> int:
    """Seconds the active catalog stays cached."""
    return get_setting("CATALOG_CACHE_TIMEOUT", 300)


def standard_price_list() -> StandardPriceList:
    """Flat price list, overridable per field via STUDIO_STANDARD_PRICES."""
    overrides = get_setting("STANDARD_PRICES", {}) or {}
    if "vanlig" in overrides:
        overrides = {**overrides, "vanlig": tuple(tuple(pair) for pair in overrides["vanlig"])}
    return StandardPriceList(**overrides)


def payment_gateway_name() -> str:
    """'mock' or 'vipps'."""
    return get_setting("PAYMENT_GATEWAY", "mock")


# =============================================================================
# DEFAULT SETTINGS REFERENCE
# =============================================================================

# STUDIO_CART_TTL_MINUTES = 30
# STUDIO_CART_STORAGE_KEY = 'danceStudio_cart'
# STUDIO_CATALOG_CACHE_TIMEOUT = 300
# STUDIO_STANDARD_PRICES = {'barnedans_per_course': 130000, 'kompani_per_course': 220000}
# STUDIO_PAYMENT_GATEWAY = 'mock'
