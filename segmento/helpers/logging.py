"""Logging setup and coloured timing helpers."""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Generator, Optional

from .formatting import Fore, Style

LOG_FORMAT = "[%(asctime)s] %(levelname)s: %(message)s"


def configure_logging(level: int = logging.INFO) -> logging.Logger:
    """Attach a single stream handler to the ``segmento`` logger."""

    logger = logging.getLogger("segmento")
    logger.setLevel(level)
    if not any(getattr(handler, "_segmento", False) for handler in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._segmento = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    return logger


@contextmanager
def log_timing(
    name: str, logger: Optional[logging.Logger] = None
) -> Generator[None, None, None]:
    """Print a coloured start/finish banner around a block with its duration.

    When ``logger`` is given the outcome is also recorded there, so timings
    survive in log files where the coloured console output does not.
    """
    print(f"{Fore.CYAN}{name}{Style.RESET_ALL}")
    start = time.perf_counter()
    try:
        yield
    except Exception as exc:
        elapsed = time.perf_counter() - start
        print(
            f"{Fore.RED}  ↳ failed after {Fore.MAGENTA}{elapsed:.2f}s{Fore.RED}: {exc}{Style.RESET_ALL}"
        )
        if logger is not None:
            logger.warning("%s failed after %.2fs: %s", name, elapsed, exc)
        raise
    elapsed = time.perf_counter() - start
    print(f"{Fore.GREEN}  ↳ completed in {Fore.MAGENTA}{elapsed:.2f}s{Style.RESET_ALL}")
    if logger is not None:
        logger.info("%s completed in %.2fs", name, elapsed)
