"""Run the task list server: `python -m daily_tasks`."""

import logging

import uvicorn

from daily_tasks.config import get_settings
from daily_tasks.logging_setup import setup_logging
from daily_tasks.main import create_app

logger = logging.getLogger("daily_tasks")


def main() -> None:
    settings = get_settings()
    log_file = setup_logging(log_dir=settings.log_dir, console_level=settings.log_level)
    logger.info("Starting on http://%s:%s (logs: %s)", settings.host, settings.port, log_file)
    uvicorn.run(
        create_app(settings=settings),
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
