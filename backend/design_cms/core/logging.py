import logging
import sys

from design_cms.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str | None = None) -> None:
    """Route all application logs to stderr.

    stdout stays clean for the stdio bridge, which speaks its protocol there.
    """
    root = logging.getLogger()
    if any(getattr(h, "_design_cms", False) for h in root.handlers):
        return
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._design_cms = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.setLevel((level or settings.LOG_LEVEL).upper())
