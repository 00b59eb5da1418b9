import pytest

from src.notifier.logging import setup_logging


@pytest.fixture(autouse=True)
def _stderr_logging():
    """Keep structlog output off stdout so CLI output can be parsed."""
    setup_logging(json_output=False, log_level="DEBUG")
