"""HTTP interface for the home feed."""

from src.api.app import create_app, router


__all__ = ["create_app", "router"]
