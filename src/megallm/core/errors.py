"""Project-wide custom exceptions.

Routers and services raise / catch these instead of transport level errors
(``httpx.HTTPError``, ``json.JSONDecodeError``) so the public error surface
stays easy to audit and to map onto the uniform failure body.
"""
from __future__ import annotations


class MegaLLMError(Exception):
    """Base class for all custom project exceptions.

    Subclass this rather than ``Exception`` directly for new domain errors.
    """


class ModelHubUnavailable(MegaLLMError):
    """Raised when the model hub client cannot be constructed due to config."""

    def __init__(self, detail: str = "Model hub client is not configured (missing MEGALLM_API_KEY)."):
        super().__init__(detail)


class UpstreamError(MegaLLMError):
    """Raised when the upstream models endpoint answers with a non-success status.

    Carries the status code and reason phrase; the message mirrors what the
    catalog shows to users (``Failed to fetch models: <reason>``).
    """

    def __init__(self, status_code: int, reason: str | None = None):
        self.status_code = status_code
        self.reason = reason or ""
        super().__init__(f"Failed to fetch models: {self.reason}")


__all__ = [
    "MegaLLMError",
    "ModelHubUnavailable",
    "UpstreamError",
]
