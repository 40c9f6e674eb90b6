# python -m app
import logging

import uvicorn

from .config import settings
from .log import configure_logging

logger = logging.getLogger(__name__)


def main() -> None:
    configure_logging(settings.log_level)
    settings.require()
    logger.info("Server starting on PORT:%s", settings.port)
    uvicorn.run("app.main:app", host="0.0.0.0", port=int(settings.port), log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
