"""Tests for the source module."""

from typing import get_type_hints
from unittest import mock
from urllib.parse import ParseResult

import pytest
import requests

from src.notifier.errors import FetchError, InvalidSourceUrl, ProxyError, TransientError
from src.notifier.models import SheetSource, SourceKind
from src.notifier.source import (
    _is_proxy,
    _is_published,
    _published_csv_url,
    check_proxy_sentinel,
    detect_source,
    extract_gid,
    extract_sheet_id,
    fetch_csv,
)

SHEET_ID = "1aFda4AwFWCShI8zS2iEmUob3OWJ-S2JGdPOFUD0h2LM"


def _response(status_code=200, body=""):
    resp = mock.Mock()
    resp.status_code = status_code
    resp.ok = status_code < 400
    resp.content = body.encode("utf-8")
    return resp


# ---------------------------------------------------------------------------
# URL Detection Tests
# ---------------------------------------------------------------------------


def test_extract_sheet_id_patterns():
    assert extract_sheet_id(f"https://docs.google.com/spreadsheets/d/{SHEET_ID}/edit") == SHEET_ID
    assert extract_sheet_id(f"https://drive.google.com/file/d/{SHEET_ID}/view") == SHEET_ID
    assert extract_sheet_id(f"https://example.com/ccc?key={SHEET_ID}&hl=en") == SHEET_ID
    assert extract_sheet_id("https://example.com/nothing-here") is None


def test_extract_gid_defaults_to_first_tab():
    assert extract_gid("https://docs.google.com/spreadsheets/d/x/edit#gid=1059265414") == "1059265414"
    assert extract_gid("https://docs.google.com/spreadsheets/d/x/edit?usp=sharing&gid=7") == "7"
    assert extract_gid("https://docs.google.com/spreadsheets/d/x/edit") == "0"


def test_detect_source_export_url():
    source = detect_source(
        f"  https://docs.google.com/spreadsheets/d/{SHEET_ID}/edit#gid=1059265414  "
    )
    assert source.kind is SourceKind.EXPORT
    assert source.sheet_id == SHEET_ID
    assert source.gid == "1059265414"
    assert source.csv_url == (
        f"https://docs.google.com/spreadsheets/d/{SHEET_ID}/export?format=csv&gid=1059265414"
    )


def test_detect_source_published_url_is_used_as_csv():
    url = "https://docs.google.com/spreadsheets/d/e/2PACX-abc/pub?gid=0&single=true&output=csv"
    source = detect_source(url)
    assert source.kind is SourceKind.PUBLISHED
    assert source.csv_url == url


def test_detect_source_published_html_switches_to_csv():
    source = detect_source("https://docs.google.com/spreadsheets/d/e/2PACX-abc/pubhtml")
    assert source.kind is SourceKind.PUBLISHED
    assert source.csv_url == "https://docs.google.com/spreadsheets/d/e/2PACX-abc/pub?output=csv"


def test_detect_source_proxy_urls():
    apps_script = "https://script.google.com/macros/s/AKfycbx/exec"
    assert detect_source(apps_script).kind is SourceKind.PROXY
    assert detect_source(apps_script).csv_url == apps_script

    function = "https://us-central1-demo.cloudfunctions.net/getSheetData"
    assert detect_source(function).kind is SourceKind.PROXY

    custom = "https://sheets.example.org/assignments.csv"
    assert detect_source(custom, proxy=True).kind is SourceKind.PROXY


@pytest.mark.parametrize("url", ["", "   ", "https://example.com/nothing-here"])
def test_detect_source_rejects_unusable_urls(url):
    with pytest.raises(InvalidSourceUrl):
        detect_source(url)


# ---------------------------------------------------------------------------
# Proxy Sentinel Tests
# ---------------------------------------------------------------------------


def test_check_proxy_sentinel():
    check_proxy_sentinel("JANUARY 5-11\n3 HXQ")
    with pytest.raises(ProxyError) as exc_info:
        check_proxy_sentinel("Error: Exception: You do not have permission")
    assert exc_info.value.detail == "Exception: You do not have permission"


# ---------------------------------------------------------------------------
# Download Tests
# ---------------------------------------------------------------------------

EXPORT_SOURCE = SheetSource(
    kind=SourceKind.EXPORT,
    url="https://docs.google.com/spreadsheets/d/abc/edit",
    csv_url="https://docs.google.com/spreadsheets/d/abc/export?format=csv&gid=0",
    sheet_id="abc",
    gid="0",
)


def test_fetch_csv_returns_decoded_body():
    with mock.patch("src.notifier.source.requests.get") as get:
        get.return_value = _response(200, "\ufeffJANUARY 5-11\n3 王小明")
        text = fetch_csv(EXPORT_SOURCE, timeout=5)

    assert text == "JANUARY 5-11\n3 王小明"
    get.assert_called_once_with(EXPORT_SOURCE.csv_url, timeout=5)


def test_fetch_csv_retries_transient_failures():
    """Test that 503 and connection errors are retried until success."""
    with mock.patch("src.notifier.source.requests.get") as get:
        get.side_effect = [
            _response(503),
            requests.ConnectionError("reset"),
            _response(200, "a,b"),
        ]
        text = fetch_csv(EXPORT_SOURCE, attempts=3, wait_seconds=0)

    assert text == "a,b"
    assert get.call_count == 3


def test_fetch_csv_gives_up_after_attempts():
    with mock.patch("src.notifier.source.requests.get") as get:
        get.side_effect = requests.Timeout("slow")
        with pytest.raises(TransientError):
            fetch_csv(EXPORT_SOURCE, attempts=2, wait_seconds=0)
    assert get.call_count == 2


def test_fetch_csv_private_sheet_is_not_retried():
    with mock.patch("src.notifier.source.requests.get") as get:
        get.return_value = _response(403, "<html>Sign in</html>")
        with pytest.raises(FetchError, match="publicly accessible"):
            fetch_csv(EXPORT_SOURCE, attempts=3, wait_seconds=0)
    assert get.call_count == 1


def test_fetch_csv_raises_proxy_error():
    proxy = detect_source("https://script.google.com/macros/s/AKfycbx/exec")
    with mock.patch("src.notifier.source.requests.get") as get:
        get.return_value = _response(200, "Error: Sheet not found")
        with pytest.raises(ProxyError) as exc_info:
            fetch_csv(proxy, attempts=3, wait_seconds=0)
    assert exc_info.value.detail == "Sheet not found"
    assert get.call_count == 1


def test_fetch_csv_keeps_proxy_failure_reason():
    """Test that a proxy's 500 reply keeps its reason in the final error."""
    proxy = detect_source("https://us-central1-demo.cloudfunctions.net/getSheetData")
    with mock.patch("src.notifier.source.requests.get") as get:
        get.return_value = _response(
            500, "Error fetching sheet data: The caller does not have permission\n"
        )
        with pytest.raises(TransientError) as exc_info:
            fetch_csv(proxy, attempts=2, wait_seconds=0)

    assert str(exc_info.value) == (
        "Sheet server answered 500: "
        "Error fetching sheet data: The caller does not have permission"
    )
    assert get.call_count == 2


def test_fetch_csv_empty_5xx_body_keeps_status_only():
    with mock.patch("src.notifier.source.requests.get") as get:
        get.return_value = _response(502)
        with pytest.raises(TransientError, match=r"^Sheet server answered 502$"):
            fetch_csv(EXPORT_SOURCE, attempts=1, wait_seconds=0)


def test_url_helpers_take_parse_results():
    for helper in (_is_proxy, _is_published, _published_csv_url):
        assert get_type_hints(helper)["parsed"] is ParseResult
