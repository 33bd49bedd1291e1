from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from megallm.core.config import get_settings
from megallm.core.logging import configure_logging
from megallm.api.routers import (
    health,
    models,
    catalog,
    site,
)

settings = get_settings()
configure_logging(settings.log_level)

app = FastAPI(title=settings.app_name)

if settings.enable_cors:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

def _include(router):
    app.include_router(router, prefix=settings.api_prefix)

_include(health.router)
_include(models.router)
_include(catalog.router)
_include(site.router)

@app.get("/")
async def root():
    return {"service": settings.app_name, "status": "ok"}
