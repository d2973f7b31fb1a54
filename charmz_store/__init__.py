"""Little Charmz boutique catalog and order backend."""

from .app import create_app

__all__ = ["create_app"]
