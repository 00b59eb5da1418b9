"""Error hierarchy for loading and interpreting assignment sheets.

Transient failures (network timeouts, 5xx responses) are retried by the
tenacity loop in ``src.notifier.source``; permanent failures surface
straight to the user with a message that can be displayed as-is.

Example usage with tenacity:
    for attempt in Retrying(retry=retry_if_exception_type(TransientError),
                            stop=stop_after_attempt(3), reraise=True):
        with attempt:
            text = _download(url, timeout)
"""


class NotifierError(Exception):
    """Base exception for all notifier errors."""

    pass


class TransientError(NotifierError):
    """Temporary failure that may succeed on retry.

    Examples: network timeouts, 503 Service Unavailable, 429 Too Many Requests.
    """

    pass


class PermanentError(NotifierError):
    """Failure that won't succeed on retry."""

    pass


class MalformedInput(PermanentError):
    """The CSV parser was handed something other than text."""

    pass


class InvalidSourceUrl(PermanentError):
    """The sheet URL is blank or no sheet id can be found in it."""

    pass


class FetchError(PermanentError):
    """The sheet could not be downloaded (typically 403/404: not shared publicly)."""

    pass


class ProxyError(PermanentError):
    """The proxy endpoint answered with an ``Error:`` body.

    The text after the prefix is kept in ``detail``.
    """

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Proxy reported an error: {detail}")


class EmptySheetError(PermanentError):
    """The sheet has no header row plus at least one data row."""

    pass
