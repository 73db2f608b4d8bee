"""Process entrypoint: load configuration, verify the build, then serve."""

import logging

import uvicorn

from .app import create_app
from .config import load_config
from .errors import StartupError

logger = logging.getLogger(__name__)


def configure_logging(level: str = "info") -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> None:
    configure_logging()
    try:
        config = load_config()
        logging.getLogger().setLevel(config.log_level.upper())
        app = create_app(config)
    except StartupError as error:
        logger.critical("%s", error.message)
        raise SystemExit(1) from error

    logger.info("Server running on port %d in %s mode", config.port, config.mode.value)
    uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level.lower())
