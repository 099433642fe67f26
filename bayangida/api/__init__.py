"""HTTP API for the admin dashboard."""

from bayangida.api.routes import router

__all__ = ["router"]
