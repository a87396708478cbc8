# app/core/logging.py
import logging
import sys
from typing import Optional

APP_LOGGER = "helphub"


def setup_logging(level: str = "INFO", app_level: Optional[str] = None) -> None:
    """
    Single stdout handler on the root logger:
    - drops existing handlers so reloads do not duplicate output
    - `helphub.*` (cors / upstream / lookup) follows app_level, else level
    - httpx request lines only show when the service itself logs at DEBUG
    """
    root = logging.getLogger()
    root.setLevel(level.upper())

    for h in list(root.handlers):
        root.removeHandler(h)

    handler = logging.StreamHandler(sys.stdout)
    fmt = "%(asctime)s %(levelname)s %(name)s %(message)s"
    handler.setFormatter(logging.Formatter(fmt))
    root.addHandler(handler)

    service_level = (app_level or level).upper()
    logging.getLogger(APP_LOGGER).setLevel(service_level)

    logging.getLogger("uvicorn.access").setLevel(logging.INFO)
    logging.getLogger("httpx").setLevel(
        logging.INFO if service_level == "DEBUG" else logging.WARNING
    )
