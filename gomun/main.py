"""FastAPI entrypoint for the GoMun agenda backend."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .api.error_handlers import register_error_handlers
from .api.routers import entries, health
from .config import load_settings
from .infra.logging import configure_logging


def create_app() -> FastAPI:
    """Instantiate the FastAPI app and register routers."""

    settings = load_settings()
    if settings.logging.format:
        configure_logging(settings.logging.level, settings.logging.format)
    else:
        configure_logging(settings.logging.level)
    application = FastAPI(title="GoMun API", version=__version__)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.api.cors_origins),
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(application)
    for router in (
        health.router,
        entries.router,
    ):
        application.include_router(router)
    return application


app = create_app()
