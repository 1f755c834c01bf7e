from __future__ import annotations

import logging

from .config import settings

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class PasswordMaskFilter(logging.Filter):
    """Replace the configured server password in rendered log messages."""

    def __init__(self, secret: str | None) -> None:
        super().__init__()
        self.secret = secret

    def filter(self, record: logging.LogRecord) -> bool:
        if not self.secret:
            return True
        message = record.getMessage()
        if self.secret in message:
            record.msg = message.replace(self.secret, "***")
            record.args = ()
        return True


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if not any(isinstance(f, PasswordMaskFilter) for f in logger.filters):
        logger.addFilter(PasswordMaskFilter(settings.password))
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(settings.log_level)
    return logger
