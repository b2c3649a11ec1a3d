import logging
import sys

import uvicorn

from hangman.core.config import settings
from hangman.core.logging import configure_logging

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


def start_dev_server() -> None:
    logger.info("Starting development server with reload")
    uvicorn.run("hangman.main:app", host="0.0.0.0", port=8000, reload=True)


def start_prod_server() -> None:
    """Start the server without reload."""
    logger.info("Starting production server")
    uvicorn.run("hangman.main:app", host="0.0.0.0", port=8000)


def run_coverage() -> None:
    from pytest import main as pytest_main

    logger.info("Running test coverage")
    sys.exit(
        pytest_main(["--cov=hangman", "--cov-report=term-missing", "--no-cov-on-fail"]),
    )
