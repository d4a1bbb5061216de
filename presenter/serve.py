"""Launch script that starts the presenter backend under Uvicorn."""

from __future__ import annotations

import logging

import uvicorn

from presenter.core.config import get_settings
from presenter.core.logging import configure_logging

logger = logging.getLogger("presenter.launcher")


def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("Starting %s on %s:%s", settings.app_name, settings.host, settings.port)

    # Uncaught faults terminate the process; the supervisor restarts it and
    # in-memory sessions are lost.
    uvicorn.run("presenter.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
