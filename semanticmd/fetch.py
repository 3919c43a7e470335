"""semanticmd.fetch - acquire HTML for the CLI and :class:`SemanticConverter`.

The conversion core never performs I/O; this module is the only place that
touches files, stdin or the network.  HTTP uses only the stdlib
(``urllib``)::

    from semanticmd.fetch import fetch_html

    html = fetch_html("https://example.com/blog/post")
"""

from __future__ import annotations

import gzip
import logging
import random
import sys
import time
import urllib.error
import urllib.request
import zlib
from pathlib import Path
from urllib.parse import urlparse

logger = logging.getLogger(__name__)

_DEFAULT_UA = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/122.0.0.0 Safari/537.36"
)

_RETRY_CODES: frozenset[int] = frozenset({429, 500, 502, 503, 504})


# ---------------------------------------------------------------------------
# Public exception
# ---------------------------------------------------------------------------


class FetchError(RuntimeError):
    """Raised when HTML cannot be read from a URL or file.

    Attributes:
        url    -- the URL (or path) that failed
        status -- HTTP status code (0 if no response was received)
    """

    def __init__(self, message: str, url: str = "", status: int = 0) -> None:
        super().__init__(message)
        self.url = url
        self.status = status


def _decode_response_body(raw: bytes, headers: object | None, url: str) -> str:
    encoding = ""
    if headers is not None:
        encoding = str(headers.get("Content-Encoding", "") or "").lower().strip()

    try:
        if encoding == "gzip":
            raw = gzip.decompress(raw)
        elif encoding in ("deflate", "zlib"):
            raw = zlib.decompress(raw)
    except (OSError, zlib.error) as exc:
        raise FetchError(f"{encoding} decompression failed for {url}: {exc}", url=url) from exc

    charset = "utf-8"
    if headers is not None and hasattr(headers, "get_content_charset"):
        charset = headers.get_content_charset("utf-8") or "utf-8"
    try:
        return raw.decode(charset, errors="replace")
    except LookupError:
        return raw.decode("utf-8", errors="replace")


def _backoff(attempt: int, retry_after: int = 0) -> float:
    return max(retry_after, 2 ** attempt) + random.uniform(0, 1)


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------


def fetch_html(
    url: str,
    *,
    timeout: int = 30,
    user_agent: str | None = None,
    max_retries: int = 2,
) -> str:
    """Fetch *url* and return the response body as a decoded string.

    Retries up to *max_retries* times with jittered exponential backoff on
    transient errors (429, 500, 502, 503, 504, and network-level failures).

    Raises:
        FetchError: On HTTP errors, connection failures, or invalid URLs.
    """
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https"):
        raise FetchError(f"Unsupported URL scheme: {parsed.scheme!r}", url=url)

    req = urllib.request.Request(
        url,
        headers={
            "User-Agent": user_agent or _DEFAULT_UA,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.9",
            "Accept-Encoding": "gzip, deflate",
        },
    )

    for attempt in range(max_retries + 1):
        try:
            with urllib.request.urlopen(req, timeout=timeout) as resp:
                return _decode_response_body(resp.read(), resp.headers, url)

        except urllib.error.HTTPError as exc:
            if exc.code in _RETRY_CODES and attempt < max_retries:
                ra_header = exc.headers.get("Retry-After", "") if exc.headers else ""
                retry_after = int(ra_header) if ra_header and ra_header.strip().isdigit() else 0
                delay = _backoff(attempt, retry_after)
                logger.debug(
                    "HTTP %d for %s, retrying in %.1fs (attempt %d/%d)",
                    exc.code, url, delay, attempt + 1, max_retries,
                )
                time.sleep(delay)
                continue
            raise FetchError(
                f"HTTP {exc.code} fetching {url}: {exc.reason}", url=url, status=exc.code,
            ) from exc

        except (urllib.error.URLError, OSError) as exc:
            reason = getattr(exc, "reason", exc)
            if attempt < max_retries:
                delay = _backoff(attempt)
                logger.debug(
                    "Network error for %s, retrying in %.1fs (attempt %d/%d): %s",
                    url, delay, attempt + 1, max_retries, reason,
                )
                time.sleep(delay)
                continue
            raise FetchError(f"Network error fetching {url}: {reason}", url=url) from exc

    raise FetchError(f"Failed to fetch {url}", url=url)


# ---------------------------------------------------------------------------
# Files / stdin
# ---------------------------------------------------------------------------


def read_input(path: str | Path | None = None) -> str:
    """Read HTML from *path*, or from stdin when *path* is ``None`` or ``-``."""
    if path is None or str(path) == "-":
        return sys.stdin.read()
    try:
        return Path(path).read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        raise FetchError(f"Cannot read {path}: {exc}", url=str(path)) from exc
