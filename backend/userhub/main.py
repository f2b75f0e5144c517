# userhub/main.py
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Your configuration and DB
from userhub.config import settings
from userhub.core.db import init_db, close_db
from userhub.core.exception_handlers import setup_exception_handlers

from userhub.api.v1.routers import users
from userhub.services.media_cloudinary import CloudinaryMediaHost

logger = logging.getLogger("uvicorn.error")

app = FastAPI(title=settings.APP_NAME)

# CORS (with Cookie)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Uniform error envelope for everything raised below the routers
setup_exception_handlers(app)

@app.on_event("startup")
async def on_startup():
    # Media host lives for the whole process; routes receive it via deps.get_media_host
    host = CloudinaryMediaHost()
    if not host.is_available():
        logger.warning("[media] Cloudinary credentials not configured; uploads will be rejected")
    app.state.media_host = host
    await init_db()

@app.on_event("shutdown")
async def on_shutdown():
    host = getattr(app.state, "media_host", None)
    if host is not None:
        await host.aclose()
    await close_db()

# REST
app.include_router(users.router, prefix="/api/v1")

@app.get("/healthz")
def healthz():
    return {"ok": True}
