"""Centralized FastAPI dependency definitions for the API layer.

Routers should import dependencies from here instead of directly from
their underlying implementation modules. Tests swap the upstream client via
``app.dependency_overrides[deps.get_modelhub_client]``.
"""

from megallm.core.config import get_settings
from megallm.core.modelhub import get_modelhub_client

__all__ = ["get_modelhub_client", "get_settings"]
