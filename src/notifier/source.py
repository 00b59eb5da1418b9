"""Resolving sheet URLs and downloading their CSV body.

Three kinds of URL are accepted:

  EXPORT     https://docs.google.com/spreadsheets/d/<id>/edit#gid=<gid>
             -> https://docs.google.com/spreadsheets/d/<id>/export?format=csv&gid=<gid>
  PUBLISHED  https://docs.google.com/spreadsheets/d/e/<token>/pub?output=csv
  PROXY      an Apps Script web app (or cloud function) that returns the sheet
             as CSV, or "Error: <detail>" when it fails

The sheet must be readable without credentials (shared by link, published, or
served by a proxy running under its owner's account).
"""

import re
from urllib.parse import ParseResult, parse_qs, urlencode, urlparse, urlunparse

import requests
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from src.notifier.errors import (
    FetchError,
    InvalidSourceUrl,
    ProxyError,
    TransientError,
)
from src.notifier.logging import get_logger
from src.notifier.models import SheetSource, SourceKind

log = get_logger(__name__)

EXPORT_URL = "https://docs.google.com/spreadsheets/d/{sheet_id}/export?format=csv&gid={gid}"
PROXY_ERROR_PREFIX = "Error:"

# Tried in order; the first pattern that matches gives the sheet id
SHEET_ID_PATTERNS = (
    re.compile(r"/spreadsheets/d/([a-zA-Z0-9-_]+)"),
    re.compile(r"/d/([a-zA-Z0-9-_]+)"),
    re.compile(r"key=([a-zA-Z0-9-_]+)"),
)
GID_PATTERN = re.compile(r"[#&?]gid=([0-9]+)")

PROXY_HOSTS = ("script.google.com", "script.googleusercontent.com", "cloudfunctions.net")

NOT_SHARED_MESSAGE = (
    "Unable to fetch data. Make sure the Google Sheet is publicly accessible "
    "(Anyone with the link can view)."
)


def extract_sheet_id(url: str) -> str | None:
    for pattern in SHEET_ID_PATTERNS:
        m = pattern.search(url)
        if m:
            return m.group(1)
    return None


def extract_gid(url: str) -> str:
    """Sheet tab id from the URL; the first tab ("0") when none is given."""
    m = GID_PATTERN.search(url)
    return m.group(1) if m else "0"


def _is_proxy(parsed: ParseResult) -> bool:
    host = parsed.netloc.lower()
    if any(host == h or host.endswith("." + h) for h in PROXY_HOSTS):
        return True
    return parsed.path.endswith("/exec")


def _is_published(parsed: ParseResult) -> bool:
    return "/spreadsheets/d/e/" in parsed.path and (
        parsed.path.endswith("/pub") or parsed.path.endswith("/pubhtml")
    )


def _published_csv_url(parsed: ParseResult) -> str:
    path = parsed.path
    if path.endswith("/pubhtml"):
        path = path[: -len("html")]
    query = parse_qs(parsed.query)
    query["output"] = ["csv"]
    return urlunparse(
        parsed._replace(path=path, query=urlencode(query, doseq=True), fragment="")
    )


def detect_source(url: str, *, proxy: bool = False) -> SheetSource:
    """Classify a sheet URL and work out where its CSV body lives.

    Args:
        url: URL as pasted by the user.
        proxy: Treat the URL as a proxy endpoint regardless of its shape.

    Raises:
        InvalidSourceUrl: If the URL is blank or not a recognizable sheet URL.
    """
    url = url.strip()
    if not url:
        raise InvalidSourceUrl("Please enter a Google Sheet URL")

    parsed = urlparse(url)
    if proxy or _is_proxy(parsed):
        return SheetSource(kind=SourceKind.PROXY, url=url, csv_url=url)

    if _is_published(parsed):
        return SheetSource(
            kind=SourceKind.PUBLISHED, url=url, csv_url=_published_csv_url(parsed)
        )

    sheet_id = extract_sheet_id(url)
    if not sheet_id:
        raise InvalidSourceUrl(
            "Invalid Google Sheet URL. Please check the URL and try again."
        )
    gid = extract_gid(url)
    return SheetSource(
        kind=SourceKind.EXPORT,
        url=url,
        csv_url=EXPORT_URL.format(sheet_id=sheet_id, gid=gid),
        sheet_id=sheet_id,
        gid=gid,
    )


def check_proxy_sentinel(text: str) -> None:
    """Raise ProxyError if the body is the proxy's "Error: ..." reply."""
    if text.startswith(PROXY_ERROR_PREFIX):
        raise ProxyError(text[len(PROXY_ERROR_PREFIX) :].strip())


def _first_line(resp: requests.Response, limit: int = 200) -> str:
    body = resp.content.decode("utf-8-sig", errors="replace").strip()
    return body.splitlines()[0][:limit] if body else ""


def _download(url: str, timeout: float) -> str:
    try:
        resp = requests.get(url, timeout=timeout)
    except (requests.Timeout, requests.ConnectionError) as e:
        log.warning("fetch_transient_error", url=url, error=str(e))
        raise TransientError(f"Network error while fetching the sheet: {e}") from e
    except requests.RequestException as e:
        raise FetchError(f"Failed to fetch the sheet: {e}") from e

    if resp.status_code == 429 or resp.status_code >= 500:
        detail = _first_line(resp)
        log.warning(
            "fetch_transient_status", url=url, status=resp.status_code, detail=detail
        )
        message = f"Sheet server answered {resp.status_code}"
        if detail:
            # Proxies report their own failures as 500 with a one-line reason
            message = f"{message}: {detail}"
        raise TransientError(message)
    if not resp.ok:
        log.error("fetch_failed", url=url, status=resp.status_code)
        raise FetchError(NOT_SHARED_MESSAGE)

    # Sheets and Apps Script always serve UTF-8, with or without a BOM
    return resp.content.decode("utf-8-sig", errors="replace")


def fetch_csv(
    source: SheetSource,
    *,
    timeout: float = 15.0,
    attempts: int = 3,
    wait_seconds: float = 2.0,
) -> str:
    """Download the CSV body of a sheet.

    Transient failures are retried up to ``attempts`` times; the last one is
    re-raised. Proxy error replies are not retried.

    Raises:
        TransientError: Network failure or 5xx/429 on every attempt.
        FetchError: The sheet is not accessible (4xx).
        ProxyError: The proxy answered "Error: ...".
    """
    log.info("fetch_started", kind=source.kind.value, url=source.csv_url)
    for attempt in Retrying(
        stop=stop_after_attempt(attempts),
        wait=wait_fixed(wait_seconds),
        retry=retry_if_exception_type(TransientError),
        reraise=True,
    ):
        with attempt:
            text = _download(source.csv_url, timeout)

    check_proxy_sentinel(text)
    log.info("fetch_succeeded", url=source.csv_url, chars=len(text))
    return text
