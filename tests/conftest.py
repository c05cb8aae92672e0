"""Shared fixtures for edscal tests."""

from collections.abc import Generator
from typing import Any, Callable

import pytest

from edscal.calendar.models import DateRange


def pytest_configure(config: Any) -> None:
    """Register test markers."""
    config.addinivalue_line("markers", "unit: Fast unit tests")
    config.addinivalue_line("markers", "integration: End-to-end pipeline and CLI tests")
    config.addinivalue_line("markers", "smoke: Basic smoke tests")


@pytest.fixture(autouse=True)
def clean_test_environment(monkeypatch: pytest.MonkeyPatch) -> Generator[None, Any, None]:
    """Keep range and logging variables from the host out of every test."""
    for name in (
        "START_DATE",
        "END_DATE",
        "EDSCAL_CALENDAR_NAME",
        "EDSCAL_CALENDAR_COLOR",
        "EDSCAL_LOG_LEVEL",
        "EDSCAL_DEBUG",
    ):
        # setenv first so teardown also removes values loaded from .env files
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    yield


@pytest.fixture
def june_range() -> DateRange:
    """The whole of June 2024."""
    return DateRange(start="2024-06-01", end="2024-06-30")


@pytest.fixture
def make_vevent() -> Callable[..., str]:
    """Build a VEVENT block from property lines.

    ``make_vevent("UID:1", "SUMMARY:Standup", sep="\\\\r\\\\n")`` joins the
    lines with the given separator (a real newline by default).
    """

    def _make(*props: str, sep: str = "\n") -> str:
        return sep.join(["BEGIN:VEVENT", *props, "END:VEVENT"])

    return _make


@pytest.fixture
def gdbus_dump() -> Callable[..., str]:
    """Wrap escaped VEVENT strings the way gdbus prints a GetObjectList reply."""

    def _dump(*vevents: str) -> str:
        quoted = ", ".join(f"'{v}'" for v in vevents)
        return f"([{quoted}],)\n"

    return _dump
