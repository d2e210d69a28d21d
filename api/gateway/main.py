from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI

from gateway.api.router import api_router
from gateway.core.config import get_settings
from gateway.core.content_config import get_content_config
from gateway.core.telemetry import (
    TelemetryRuntime,
    configure_api_logging,
    install_request_logging,
    setup_api_telemetry,
    shutdown_api_telemetry,
)
from gateway.services.repository import get_repository

settings = get_settings()
_telemetry_runtime: TelemetryRuntime | None = None
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    # Merge groups, categories and id salts are validated before serving;
    # a ConfigurationError here aborts startup.
    content_config = get_content_config()
    logger.info(
        "content config loaded merge_groups=%s categories=%s id_namespaces=%s",
        len(content_config.identity.groups),
        len(content_config.categories),
        ",".join(sorted(content_config.ids.namespaces)),
    )
    try:
        yield
    finally:
        if _telemetry_runtime is not None:
            shutdown_api_telemetry(app, _telemetry_runtime)
        await get_repository().close()
        get_repository.cache_clear()


configure_api_logging(settings)
app = FastAPI(title=settings.app_name, lifespan=lifespan)
_telemetry_runtime = setup_api_telemetry(app, settings)
install_request_logging(app)
app.include_router(api_router)
