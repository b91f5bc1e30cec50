"""Ledgerman Admin with Unfold theme."""

__all__ = [
    "BaseModelAdmin",
    "BaseTabularInline",
    "format_delta",
]


def __getattr__(name):
    """Lazy import to avoid importing unfold during app loading."""
    if name in ("BaseModelAdmin", "BaseTabularInline", "format_delta"):
        from ledgerman.contrib.admin_unfold import base
        return getattr(base, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
