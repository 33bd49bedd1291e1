"""ModelHub client helpers.

Centralizes the one outbound call this service makes: listing models from the
upstream MegaLLM gateway. The HTTP route, the catalog route and the terminal
presenter all share the instance returned by :func:`get_modelhub_client`, so
the endpoint URL and the bearer credential live only in settings.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from .config import get_settings
from .errors import ModelHubUnavailable, UpstreamError
from megallm.schemas.models import ModelListResult

logger = logging.getLogger("megallm.modelhub")


class ModelHubClient:
    """Authenticated GET against the upstream models listing.

    ``fetch_models`` never raises: transport failures, non-success statuses
    and malformed bodies all collapse into ``ModelListResult.failure`` with a
    human-readable message. No retry is attempted here; callers re-invoke.
    """

    def __init__(
        self,
        models_url: str,
        api_key: str,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.models_url = models_url
        self._api_key = api_key
        self._timeout = timeout
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._api_key}"}

    async def _get_json(self) -> Any:
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            resp = await client.get(self.models_url, headers=self._headers())
            if not resp.is_success:
                raise UpstreamError(resp.status_code, resp.reason_phrase)
            return resp.json()

    async def fetch_models(self) -> ModelListResult:
        start_time = time.perf_counter()
        try:
            payload = await self._get_json()
            records = payload.get("data") if isinstance(payload, dict) else None
            result = ModelListResult.ok(records or [], datetime.now(timezone.utc))
        except UpstreamError as e:
            logger.warning(
                "modelhub.fetch.failure",
                extra={"url": self.models_url, "status_code": e.status_code, "error": str(e)},
            )
            return ModelListResult.failure(str(e))
        except (httpx.HTTPError, ValueError, ValidationError) as e:
            # ValueError covers json.JSONDecodeError
            logger.warning(
                "modelhub.fetch.failure",
                extra={"url": self.models_url, "error": repr(e)},
            )
            return ModelListResult.failure(str(e) or e.__class__.__name__)
        logger.info(
            "modelhub.fetch.success",
            extra={
                "url": self.models_url,
                "total": result.total,
                "duration_ms": round((time.perf_counter() - start_time) * 1000, 2),
            },
        )
        return result


@lru_cache
def get_modelhub_client() -> Optional[ModelHubClient]:
    """Return the shared client if a credential is configured, else None."""
    settings = get_settings()
    if not settings.modelhub_api_key:
        return None
    return ModelHubClient(
        models_url=settings.modelhub_models_url,
        api_key=settings.modelhub_api_key.get_secret_value(),
        timeout=settings.modelhub_timeout,
    )


def ensure_modelhub_client() -> ModelHubClient:
    """Strict getter that raises if the client is unavailable."""
    client = get_modelhub_client()
    if client is None:
        raise ModelHubUnavailable()
    return client


async def fetch_models(client: Optional[ModelHubClient]) -> ModelListResult:
    """Fetch through ``client``, mapping a missing client to the failure shape."""
    if client is None:
        logger.error("modelhub.unavailable")
        return ModelListResult.failure(str(ModelHubUnavailable()))
    return await client.fetch_models()
