from typing import Optional

from fastapi import APIRouter, Depends

from megallm.api import deps
from megallm.core.modelhub import ModelHubClient, fetch_models
from megallm.schemas.models import ModelListResult
from megallm.services.presenter import CatalogPresenter

router = APIRouter(prefix="/catalog", tags=["catalog"])


class _ConfiguredSource:
    # an unconfigured client still yields the uniform failure result
    def __init__(self, client: Optional[ModelHubClient]) -> None:
        self._client = client

    async def fetch_models(self) -> ModelListResult:
        return await fetch_models(self._client)


@router.get("", summary="Model catalog rendered into tabbed tables")
async def get_catalog(client: Optional[ModelHubClient] = Depends(deps.get_modelhub_client)):
    """One fetch, presented. Failures stay inside the payload (``status="error"``)."""
    presenter = CatalogPresenter(_ConfiguredSource(client), auto_refresh=False)
    await presenter.start()
    return presenter.view().to_dict()
