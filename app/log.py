# app/log.py
import logging
import sys

from fastapi import Request

logger = logging.getLogger("app.access")


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )


def log_request(request: Request) -> None:
    # REQUEST | Method | Path
    logger.info("REQUEST | %s | %s", request.method, request.url.path)


def log_response(request: Request, message: str, status_code: int = 200) -> None:
    # RESPONSE | Status Code | Method | Path | Message
    logger.info(
        "RESPONSE | %s | %s | %s | %s",
        status_code,
        request.method,
        request.url.path,
        message,
    )
