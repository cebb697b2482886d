"""
Logging setup for the account management service.

Everything goes through the root logger.  Two things are specific to
this service: records are passed through ``SecretMaskFilter`` so bearer
tokens and the service role key never reach a handler, and the HTTP
client libraries used by the ``supabase`` SDK are held at WARNING
because they log every request URL at INFO.
"""

import logging
import re
from pathlib import Path
from typing import Iterable, List, Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

QUIET_LOGGERS = ("httpx", "httpcore", "hpack", "urllib3")

_BEARER = re.compile(r"(?i)(bearer\s+)[A-Za-z0-9\-._~+/]+=*")


class SecretMaskFilter(logging.Filter):
    """Replace bearer tokens and known secrets in log messages with ``***``."""

    def __init__(self, secrets: Iterable[str] = ()) -> None:
        super().__init__()
        self.secrets = [secret for secret in secrets if secret]

    def mask(self, text: str) -> str:
        text = _BEARER.sub(r"\1***", text)
        for secret in self.secrets:
            text = text.replace(secret, "***")
        return text

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        masked = self.mask(message)
        if masked != message:
            record.msg, record.args = masked, None
        return True


_installed: List[logging.Handler] = []


def setup_logging(level: str = "INFO", logfile: Optional[str] = None, secrets: Iterable[str] = ()) -> None:
    """Attach console (and optional file) handlers to the root logger.

    The level and the masked secrets are applied on every call; the
    handlers themselves are only added once, since one process may
    build several apps.
    """
    root = logging.getLogger()
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    root.setLevel(numeric_level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))

    if not _installed:
        formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
        _installed.append(logging.StreamHandler())
        if logfile:
            _installed.append(logging.FileHandler(Path(logfile).resolve(), encoding="utf-8"))
        for handler in _installed:
            handler.setFormatter(formatter)
            root.addHandler(handler)

    mask = SecretMaskFilter(secrets)
    for handler in _installed:
        for old in [f for f in handler.filters if isinstance(f, SecretMaskFilter)]:
            handler.removeFilter(old)
        handler.addFilter(mask)
