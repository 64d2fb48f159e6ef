from __future__ import annotations

import logging

import uvicorn

from .config import configure_logging, get_settings

log = logging.getLogger(__name__)


def run() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)
    if settings.vercel:
        # The platform imports ``wrapped_api.app:app`` itself.
        log.info("Managed deployment detected; not starting a local server")
        return
    uvicorn.run("wrapped_api.app:app", host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
