# util/timing.py
import time
from contextlib import contextmanager
from typing import Iterator, Dict, Any
import logging


@contextmanager
def timed(
    logger: logging.Logger, name: str, level: int = logging.INFO, **kv: Any
) -> Iterator[Dict[str, int]]:
    """
    Usage:
      with timed(logger, "check.match", sentences=10) as t:
          ...
      t["ms"]  # elapsed milliseconds, set on exit
    Emits one record on exit: "<name>.done ms=<int> key=val ..."
    """
    holder: Dict[str, int] = {"ms": 0}
    t0 = time.perf_counter()
    try:
        yield holder
    finally:
        dt_ms = int((time.perf_counter() - t0) * 1000)
        holder["ms"] = dt_ms
        suffix = "".join(f" {k}={v}" for k, v in kv.items())
        logger.log(level, "%s.done ms=%d%s", name, dt_ms, suffix)
