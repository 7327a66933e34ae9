# task_api/__main__.py
"""Run the task API with uvicorn: ``python -m task_api``."""

import logging

import uvicorn

from task_api import config


def main() -> None:
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger(__name__).info("Server running on http://%s:%s", config.HOST, config.PORT)
    uvicorn.run("task_api.main:app", host=config.HOST, port=config.PORT, log_level=config.LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
