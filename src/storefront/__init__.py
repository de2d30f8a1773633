"""Storefront factory.

Provides get_storefront() / set_storefront() so the API and tests share
one storefront (and therefore one subscriber registry) per process.
"""

from storefront.storefront import Storefront

_current_storefront: Storefront | None = None


def get_storefront() -> Storefront:
    """Return the process-wide storefront."""
    global _current_storefront
    if _current_storefront is None:
        _current_storefront = Storefront()
    return _current_storefront


def set_storefront(storefront: Storefront) -> None:
    """Override the active storefront (useful for tests)."""
    global _current_storefront
    _current_storefront = storefront


def reset_storefront() -> None:
    """Reset to a fresh, closed storefront."""
    global _current_storefront
    _current_storefront = None
