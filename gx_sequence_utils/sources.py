"""Open line-buffered FASTA sources from paths, stdin or HTTP URLs."""

from __future__ import annotations

import io
import logging
import sys
import time
from pathlib import Path
from typing import IO, Optional

import requests

from .config import HTTP_DEFAULTS, RuntimeConfig

logger = logging.getLogger(__name__)

STDIN_MARKER = "-"
REMOTE_SCHEMES = ("http://", "https://")


def is_remote(location: str) -> bool:
    return location.lower().startswith(REMOTE_SCHEMES)


def open_source(
    location: str,
    config: Optional[RuntimeConfig] = None,
    session: Optional[requests.Session] = None,
) -> IO[bytes]:
    """Return a binary stream with ``readline()`` for ``location``."""

    config = config or RuntimeConfig()
    if location == STDIN_MARKER:
        return sys.stdin.buffer
    if is_remote(location):
        return open_url(location, timeout=config.http_timeout, retries=config.http_retries, session=session)
    path = Path(location)
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")
    return path.open("rb")


def open_url(
    url: str,
    timeout: int = HTTP_DEFAULTS.timeout,
    retries: int = HTTP_DEFAULTS.retries,
    session: Optional[requests.Session] = None,
) -> IO[bytes]:
    """Start a streamed GET for ``url`` and expose the body as a buffered stream.

    Only the initial request is retried; a failure while the body is being
    read surfaces from the stream itself.
    """

    sess = session or requests.Session()
    headers = {"User-Agent": HTTP_DEFAULTS.user_agent}
    last_exc: Exception | None = None
    for attempt in range(1, retries + 1):
        try:
            response = sess.get(url, headers=headers, stream=True, timeout=timeout)
            response.raise_for_status()
            response.raw.decode_content = True
            logger.debug("Streaming FASTA from %s", url)
            return io.BufferedReader(response.raw)
        except requests.RequestException as exc:
            last_exc = exc
            logger.warning("Request to %s failed (attempt %s/%s): %s", url, attempt, retries, exc)
            if attempt == retries:
                break
            time.sleep(2 ** (attempt - 1))
    assert last_exc is not None
    raise OSError(f"Failed to fetch {url}: {last_exc}") from last_exc
