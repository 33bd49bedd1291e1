from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import FileResponse

from megallm.api import deps
from megallm.core.config import Settings

router = APIRouter(prefix="/site", tags=["site"])


def base_options(settings: Settings) -> dict:
    """Shared nav configuration handed to the documentation renderer."""
    return {
        "nav": {
            "title": settings.site_title,
            "logo": {"src": settings.site_logo, "alt": f"{settings.site_title} Logo", "width": 40, "height": 40},
        },
        "links": [
            {"text": "Documentation", "url": settings.docs_url, "icon": "book", "external": False},
            {"text": "Dashboard", "url": settings.dashboard_url, "icon": "github", "external": True},
        ],
    }


@router.get("/layout", summary="Site shell navigation options")
async def layout(settings: Settings = Depends(deps.get_settings)):
    return base_options(settings)


@router.get("/openapi", summary="Static OpenAPI document for the API reference pages")
async def openapi_document(settings: Settings = Depends(deps.get_settings)):
    path = Path(settings.openapi_spec_path)
    if not path.is_file():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"OpenAPI document not found: {path}")
    return FileResponse(path, media_type="application/yaml" if path.suffix in (".yaml", ".yml") else "application/json")
