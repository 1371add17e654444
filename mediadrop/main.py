"""FastAPI app entrypoint.

Exposes a single route, POST /upload. Every request is access-logged in
Combined Log Format to stderr.

Run with `mediadrop` (or `python -m mediadrop.main`); configuration comes from
the environment and an optional `.env` file.
"""

import logging
import os
import sys
import uuid
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request

from mediadrop.core.access_log import CombinedLogMiddleware
from mediadrop.core.config import ConfigError, Settings, load_env_file, load_settings, settings_from_env
from mediadrop.core.errors import UploadError, upload_error_handler
from mediadrop.core.logging import request_id_var, setup_logging
from mediadrop.routers.uploads import router as uploads_router


logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or load_settings()
    app = FastAPI(title="mediadrop", docs_url=None, redoc_url=None, openapi_url=None)
    app.state.settings = settings

    app.include_router(uploads_router)
    app.add_exception_handler(UploadError, upload_error_handler)

    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        rid = request.headers.get("x-request-id") or uuid.uuid4().hex
        token = request_id_var.set(rid)
        try:
            response = await call_next(request)
            response.headers["x-request-id"] = rid
            return response
        finally:
            request_id_var.reset(token)

    # added last so it wraps everything, unmatched routes included
    app.add_middleware(CombinedLogMiddleware)
    return app


def main() -> None:
    load_env_file()
    setup_logging()
    try:
        settings = settings_from_env(os.environ)
    except ConfigError as exc:
        logger.error("Can not load configuration : %s", exc)
        sys.exit(1)

    logger.info("upload directory: %s", settings.tmp_dir)
    if not os.path.isdir(settings.tmp_dir):
        logger.warning("upload directory %s does not exist; uploads will fail", settings.tmp_dir)

    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        access_log=False,
        log_config=None,
    )


if __name__ == "__main__":
    main()
