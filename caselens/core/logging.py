# caselens/core/logging.py
import logging

from caselens.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    level_name = (level or settings.LOG_LEVEL).upper()
    logging.basicConfig(level=getattr(logging, level_name, logging.INFO), format=LOG_FORMAT)

    # the SDK and boto loggers are very chatty at INFO
    for name in ("httpx", "openai", "botocore", "boto3", "urllib3"):
        logging.getLogger(name).setLevel(logging.WARNING)
