import logging
from typing import Optional

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from megallm.api import deps
from megallm.core.modelhub import ModelHubClient, fetch_models
from megallm.schemas.models import ModelListError, ModelListResponse

router = APIRouter(prefix="/models", tags=["models"])
logger = logging.getLogger("megallm.api.models")


@router.get(
    "",
    summary="List available models",
    response_model=ModelListResponse,
    responses={500: {"model": ModelListError}},
)
async def list_models(client: Optional[ModelHubClient] = Depends(deps.get_modelhub_client)):
    """Relay the upstream model list.

    Any upstream failure is reported as a 500 with an empty list; the route
    itself never raises for it.
    """
    result = await fetch_models(client)
    body = result.to_body()
    if not result.success:
        logger.error("models.proxy.failure", extra={"error": result.error})
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body.model_dump())
    return JSONResponse(status_code=status.HTTP_200_OK, content=body.model_dump(by_alias=True))
